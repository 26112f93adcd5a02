# userapi/services/user_svc.py
from __future__ import annotations

import re
import sqlite3
from sqlite3 import Connection

from ..logs import LogContext
from ..models import User, UserPatch, UserSummary, row_to_summary, row_to_user
from ..repository import user_repo

_INT_RE = re.compile(r"[+-]?[0-9]+")

# SQLite INTEGER is a signed 64-bit value.
_ID_MIN = -(2 ** 63)
_ID_MAX = 2 ** 63 - 1


class UserValidationError(ValueError):
    """Malformed request: missing field or unparseable id."""


class UserNotFoundError(LookupError):
    """Update matched no row."""


class UserStorageError(RuntimeError):
    """Any failure raised by the database driver."""


def parse_user_id(raw: str | None) -> int:
    s = raw or ""
    if not _INT_RE.fullmatch(s):
        raise UserValidationError("Invalid user ID")
    user_id = int(s)
    if not _ID_MIN <= user_id <= _ID_MAX:
        raise UserValidationError("Invalid user ID")
    return user_id


def list_users(conn: Connection) -> list[UserSummary]:
    try:
        rows = user_repo.list_users(conn)
        return [row_to_summary(r) for r in rows]
    except sqlite3.Error as e:
        raise UserStorageError(str(e)) from e


def create_user(conn: Connection, name: str, email: str, age: str, log: LogContext | None = None) -> User:
    if not name or not email or not age:
        raise UserValidationError("All fields are required")

    try:
        user_id = user_repo.insert_user(conn, name, email, age)
    except sqlite3.Error as e:
        raise UserStorageError(f"Failed to create user: {e}") from e

    user = User(id=user_id, name=name, email=email, age=age)
    if log is not None:
        log.set_entity("user", user_id)
        log.set_after(user.model_dump())
    return user


def update_user(conn: Connection, raw_id: str | None, patch: UserPatch, log: LogContext | None = None) -> User:
    user_id = parse_user_id(raw_id)
    if patch.is_empty():
        raise UserValidationError("At least one field (name, email, or age) is required for update")
    if log is not None:
        log.set_entity("user", user_id)

    try:
        changed = user_repo.update_user(conn, user_id, patch)
    except sqlite3.Error as e:
        raise UserStorageError(f"Failed to update user: {e}") from e
    if changed == 0:
        raise UserNotFoundError("User not found or no changes made")

    try:
        row = user_repo.get_user(conn, user_id)
    except sqlite3.Error as e:
        raise UserStorageError(f"Failed to fetch updated user: {e}") from e
    if row is None:
        raise UserStorageError(f"Failed to fetch updated user: no row with id {user_id}")

    user = row_to_user(row)
    if log is not None:
        log.set_after(user.model_dump())
    return user
