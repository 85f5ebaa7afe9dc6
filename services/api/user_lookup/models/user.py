"""User model.

The authoritative user row. `id` is assigned by the database and is the
only lookup key.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from user_lookup.stores.postgres import Base


class User(Base):
    """User - durable record served through the read-through cache."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    age: Mapped[int] = mapped_column(Integer)

    def __repr__(self) -> str:
        return f"<User {self.id}>"
