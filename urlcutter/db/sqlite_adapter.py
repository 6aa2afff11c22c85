"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

Key characteristics:
- File-based (single .db file, created on first open)
- No server required
- Single writer at a time (file locking), which is what serializes inserts
- WAL journal: readers never block on, or see half of, an open write
"""

from pathlib import Path
from typing import Any, Union

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from urlcutter.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    Args:
        busy_timeout: Seconds a connection waits on a locked database
            before the driver gives up with "database is locked"
    """

    def __init__(self, busy_timeout: float = 5.0):
        self.busy_timeout = busy_timeout

    def database_url(self, path: str) -> str:
        return f"sqlite+aiosqlite:///{Path(path).expanduser()}"

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.

        SQLite-specific configuration:
        - NullPool: one connection per session, closed afterwards
        - check_same_thread=False: Required for async SQLite operations
        - WAL journal and full fsync on every commit, set on each new connection

        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)

        Returns:
            Configured AsyncEngine for SQLite
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        engine = create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=FULL")
            cursor.close()

        return engine

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        """
        Get SQLite-specific connection arguments.

        Returns:
            Dictionary with SQLite connection arguments
        """
        return {
            "check_same_thread": False,
            "timeout": self.busy_timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    async def begin_write(self, session: Union[AsyncSession, AsyncConnection]) -> None:
        """
        Take SQLite's RESERVED lock before reading the counter.

        A deferred transaction would read the counter under a shared lock and
        upgrade on the first write, which lets two writers read the same
        value. BEGIN IMMEDIATE makes the second writer wait (busy timeout)
        until the first one commits or rolls back.
        """
        await session.execute(text("BEGIN IMMEDIATE"))


def get_database_adapter(busy_timeout: float = 5.0) -> DatabaseAdapter:
    """
    Factory function to get the database adapter.

    Returns SQLiteAdapter; the store is an embedded single-file database.

    Returns:
        DatabaseAdapter instance
    """
    return SQLiteAdapter(busy_timeout=busy_timeout)
