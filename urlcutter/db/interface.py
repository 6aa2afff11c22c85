"""
Database Abstraction Interface

This module defines the contract between the sequence-keyed store and the
database engine underneath it. The store only talks to an adapter, so the
engine-specific parts (connection arguments, pragmas, how the single
writer lock is taken) live in one class per backend.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Union
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Update the factory function to return the new adapter
    """

    @abstractmethod
    def database_url(self, path: str) -> str:
        """
        Build the SQLAlchemy connection URL for a store file.

        Args:
            path: Filesystem path of the store

        Returns:
            Async driver URL (e.g. sqlite+aiosqlite:///...)
        """
        pass

    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine configuration options

        Returns:
            Configured AsyncEngine instance
        """
        pass

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """
        Get the connection pool class for this database type.

        Returns:
            Pool class or None to use default
        """
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """
        Get connection arguments specific to this database type.

        Returns:
            Dictionary of connection arguments
        """
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """
        Get additional engine configuration specific to this database type.

        Returns:
            Dictionary of engine configuration options
        """
        pass

    @abstractmethod
    async def begin_write(self, session: Union[AsyncSession, AsyncConnection]) -> None:
        """
        Start a write transaction holding the database's writer lock.

        Inserts advance the collection counter, so the lock has to be held
        from the first statement until commit. Different databases have
        different locking mechanisms, so each adapter implements its own.

        Schema creation in SequenceKeyedStore.open() takes the same lock,
        which is why a bare connection is accepted too.

        Args:
            session: The database session or connection

        Raises:
            SQLAlchemyError: If the lock cannot be acquired in time
        """
        pass
