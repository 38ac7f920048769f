from __future__ import annotations

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from timesheets.db.session import (
    create_engine,
    create_schema,
    create_sessionmaker,
)
from timesheets.db.session import engine as engine

# Tests replace `timesheets.db.SessionMaker` with one bound to a temporary
# database; `get_session()` looks it up at call time.
SessionMaker: async_sessionmaker[AsyncSession] = create_sessionmaker(engine)


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""
    async with SessionMaker() as session:
        yield session


__all__ = [
    "SessionMaker",
    "create_engine",
    "create_schema",
    "create_sessionmaker",
    "engine",
    "get_session",
]
