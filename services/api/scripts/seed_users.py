#!/usr/bin/env python3
"""Seed database with sample users.

Creates the `users` table if it is missing and inserts sample rows.
Idempotent: existing ids are left untouched.

Usage:
    cd services/api
    python -m scripts.seed_users
"""

import asyncio
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy import select, text

from user_lookup.models import User
from user_lookup.settings import get_settings
from user_lookup.stores.postgres import close_db, create_engine, create_session_factory, create_tables

load_dotenv()

SAMPLE_USERS = [
    {"id": 1, "name": "Alice", "age": 30},
    {"id": 3, "name": "Bob", "age": 41},
    {"id": 4, "name": "Carol", "age": 27},
]


async def seed_users() -> None:
    """Insert sample users that do not exist yet."""
    engine = create_engine(get_settings())
    session_factory = create_session_factory(engine)

    try:
        await create_tables(engine)
        async with session_factory() as session:
            existing = set(
                (await session.execute(select(User.id).where(User.id.in_([u["id"] for u in SAMPLE_USERS]))))
                .scalars()
                .all()
            )
            for user_def in SAMPLE_USERS:
                if user_def["id"] in existing:
                    print(f"  - user {user_def['id']} already present")
                    continue
                session.add(User(**user_def))
                print(f"  + {user_def['name']} (id={user_def['id']})")
            # Explicit ids bypass the serial sequence; move it past them.
            await session.flush()
            await session.execute(
                text("SELECT setval(pg_get_serial_sequence('users', 'id'), (SELECT MAX(id) FROM users))")
            )
            await session.commit()
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(seed_users())
