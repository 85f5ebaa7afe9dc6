"""User repository over PostgreSQL.

`fetch_by_id` is the only read the lookup path needs:
- a row -> UserRecord
- no row -> None (not an error)
- anything else -> StoreError
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from user_lookup.errors import StoreError
from user_lookup.models import User
from user_lookup.schemas import UserRecord

logger = logging.getLogger("uvicorn.error")


class PostgresUserStore:
    """Read-only access to the `users` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_by_id(self, user_id: int) -> UserRecord | None:
        """Fetch a user by primary key.

        Args:
            user_id: User identifier.

        Returns:
            The user record, or None if no such row exists.

        Raises:
            StoreError: If the query fails.
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(User).where(User.id == user_id))
                row = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"User query failed for id={user_id}: {e}")
            raise StoreError(f"query failed: {e}", cause=e) from e

        if row is None:
            return None
        return UserRecord.from_row(row)
