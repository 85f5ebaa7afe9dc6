"""SQLAlchemy ORM models.

Models represent database tables:
- users: Authoritative user records
"""

from user_lookup.models.user import User

__all__ = ["User"]
