"""Schemas for user lookups (/user)."""

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from user_lookup.models import User


class UserRecord(BaseModel):
    """A user as served to callers and stored in the cache."""

    id: int
    name: str
    age: int

    model_config = {"frozen": True}

    @classmethod
    def from_row(cls, row: "User") -> "UserRecord":
        """Build a record from an ORM row."""
        return cls(id=row.id, name=row.name, age=row.age)
