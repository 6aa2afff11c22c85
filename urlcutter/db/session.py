"""
Database Session Management

This module builds the session factory for a store's engine and the
transaction scope every store operation runs in.

Key Features:
- One session (and, with NullPool, one SQLite connection) per operation
- Automatic commit on success, rollback on exception
- No module-level engine: each SequenceKeyedStore owns its own
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory bound to engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
        autoflush=False,
    )


@asynccontextmanager
async def session_scope(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Provide a transactional scope around a series of operations.

    This function:
    - Creates a new async session
    - Yields it to the caller
    - Commits on successful completion
    - Rolls back on any exception and re-raises it

    Usage:
        async with session_scope(session_maker) as session:
            await session.execute(...)
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise
