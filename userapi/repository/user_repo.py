from __future__ import annotations

from sqlite3 import Connection

from ..models import UserPatch

# Columns a patch may touch; anything else never reaches the SQL text.
PATCHABLE_COLUMNS = ("name", "email", "age")


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            age TEXT NOT NULL
        )
        """
    )


def list_users(conn: Connection):
    return conn.execute("SELECT id, name, email FROM users ORDER BY id").fetchall()


def insert_user(conn: Connection, name: str, email: str, age: str) -> int:
    cur = conn.execute(
        "INSERT INTO users(name, email, age) VALUES(:name, :email, :age)",
        {"name": name, "email": email, "age": age},
    )
    return int(cur.lastrowid)


def get_user(conn: Connection, user_id: int):
    return conn.execute(
        "SELECT id, name, email, age FROM users WHERE id = :id",
        {"id": user_id},
    ).fetchone()


def build_update(user_id: int, patch: UserPatch) -> tuple[str, dict]:
    """
    Build ``UPDATE users SET ...`` for the supplied fields only.

    The WHERE clause also requires at least one supplied value to differ from
    the stored one, so a no-op update reports zero changed rows (same as a
    missing id).
    """
    changes = patch.changes()
    unknown = set(changes) - set(PATCHABLE_COLUMNS)
    if unknown:
        raise ValueError(f"not patchable: {sorted(unknown)}")
    if not changes:
        raise ValueError("empty patch")

    cols = [c for c in PATCHABLE_COLUMNS if c in changes]
    set_sql = ", ".join(f"{c} = :{c}" for c in cols)
    differs_sql = " OR ".join(f"{c} IS NOT :{c}" for c in cols)
    sql = f"UPDATE users SET {set_sql} WHERE id = :id AND ({differs_sql})"
    params = {c: changes[c] for c in cols}
    params["id"] = user_id
    return sql, params


def update_user(conn: Connection, user_id: int, patch: UserPatch) -> int:
    sql, params = build_update(user_id, patch)
    cur = conn.execute(sql, params)
    return int(cur.rowcount)
