"""
User repository and patch builder tests.
"""

import pytest

from userapi.models import UserPatch
from userapi.repository import user_repo


class TestBuildUpdate:

    def test_only_supplied_columns_are_set(self):
        sql, params = user_repo.build_update(7, UserPatch(email="e@x.com"))
        assert sql == "UPDATE users SET email = :email WHERE id = :id AND (email IS NOT :email)"
        assert params == {"email": "e@x.com", "id": 7}

    def test_column_order_is_stable(self):
        sql, params = user_repo.build_update(1, UserPatch(age="9", name="N"))
        assert "SET name = :name, age = :age WHERE" in sql
        assert params == {"name": "N", "age": "9", "id": 1}

    def test_values_never_reach_sql_text(self):
        evil = "x'; DROP TABLE users; --"
        sql, params = user_repo.build_update(1, UserPatch(name=evil))
        assert evil not in sql
        assert params["name"] == evil

    def test_empty_patch_rejected(self):
        with pytest.raises(ValueError):
            user_repo.build_update(1, UserPatch(name="", email=None))


class TestUserPatch:

    def test_empty_strings_count_as_absent(self):
        p = UserPatch(name="", email="e", age=None)
        assert p.changes() == {"email": "e"}
        assert not p.is_empty()
        assert UserPatch().is_empty()


class TestUserRepo:

    def test_insert_and_get(self, mem_conn):
        uid = user_repo.insert_user(mem_conn, "Alice", "a@x.com", "30")
        row = user_repo.get_user(mem_conn, uid)
        assert row["name"] == "Alice" and row["email"] == "a@x.com" and row["age"] == "30"

    def test_ids_are_unique(self, mem_conn):
        a = user_repo.insert_user(mem_conn, "A", "a", "1")
        b = user_repo.insert_user(mem_conn, "B", "b", "2")
        assert a != b

    def test_list_users_selects_summary_columns(self, mem_conn):
        user_repo.insert_user(mem_conn, "A", "a", "1")
        rows = user_repo.list_users(mem_conn)
        assert len(rows) == 1
        assert set(rows[0].keys()) == {"id", "name", "email"}

    def test_update_counts_changed_rows(self, mem_conn):
        uid = user_repo.insert_user(mem_conn, "A", "a", "1")
        assert user_repo.update_user(mem_conn, uid, UserPatch(age="2")) == 1
        assert user_repo.update_user(mem_conn, uid, UserPatch(age="2")) == 0
        assert user_repo.update_user(mem_conn, uid + 100, UserPatch(age="3")) == 0
        assert user_repo.get_user(mem_conn, uid)["age"] == "2"

    def test_partial_change_with_one_identical_field_still_updates(self, mem_conn):
        uid = user_repo.insert_user(mem_conn, "A", "a", "1")
        assert user_repo.update_user(mem_conn, uid, UserPatch(name="A", email="b")) == 1
        row = user_repo.get_user(mem_conn, uid)
        assert (row["name"], row["email"], row["age"]) == ("A", "b", "1")
