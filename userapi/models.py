from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

from pydantic import BaseModel


class UserSummary(BaseModel):
    id: int
    name: str
    email: str


class User(UserSummary):
    # Free text: never parsed as a number.
    age: str


@dataclass(frozen=True)
class UserPatch:
    """Partial update of a user; None (or empty) means "leave unchanged"."""

    name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[str] = None

    def changes(self) -> dict[str, str]:
        out: dict[str, str] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            if v:
                out[f.name] = v
        return out

    def is_empty(self) -> bool:
        return not self.changes()


def row_to_user(row) -> User:
    return User(id=int(row["id"]), name=row["name"], email=row["email"], age=row["age"])


def row_to_summary(row) -> UserSummary:
    return UserSummary(id=int(row["id"]), name=row["name"], email=row["email"])
