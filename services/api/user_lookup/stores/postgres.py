"""PostgreSQL store with async SQLAlchemy.

Handles:
- Engine creation and connection pooling
- Session factory construction
- Schema helpers for development/testing

The engine and session factory are created by the caller (application
lifespan, scripts) and passed explicitly to repositories.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from user_lookup.settings import Settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the database connection pool."""
    return create_async_engine(
        settings.async_database_url,
        echo=settings.debug,
        connect_args=settings.asyncpg_connect_args,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def ping_db(engine: AsyncEngine) -> None:
    """Validate connectivity with a trivial query."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db(engine: AsyncEngine | None) -> None:
    """Close database connection pool."""
    if engine is not None:
        await engine.dispose()


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables (for development/testing only)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
