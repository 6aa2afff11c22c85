"""
Sequence-Keyed Store

Durable storage of entries in a single SQLite file. Every insert takes the
next number from the collection's counter, turns it into a short key and
writes the entry, all inside one write transaction.

Design Decisions:
- Explicit object with an open/close lifecycle, no module-level engine
- Counter origin is 1 (COUNTER_ORIGIN): the first entry gets key "2"
- The collection row (and with it the counter) is created lazily by the
  first insert, so lookups can tell "nothing written yet" from "unknown key"
- Engine errors are wrapped in StorageError and never retried here

Usage:
    async with await SequenceKeyedStore.open("urlcutter.db") as store:
        key = await store.insert("http://example.com")
        entry = await store.lookup(key)
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from urlcutter.core.exceptions import (
    CollectionMissingError,
    EncodeError,
    ShortKeyNotFoundError,
    StorageError,
)
from urlcutter.core.key_codec import encode_key
from urlcutter.db.interface import DatabaseAdapter
from urlcutter.db.models import COUNTER_ORIGIN, Collection, Entry, EntryRecord
from urlcutter.db.session import create_session_maker, session_scope
from urlcutter.db.sqlite_adapter import get_database_adapter

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "urlcutter"


class SequenceKeyedStore:
    """
    Embedded key-value store handing out one sequence number per insert.

    Use SequenceKeyedStore.open() rather than the constructor; it creates
    the file and schema and returns a ready store.
    """

    def __init__(
        self,
        engine,
        adapter: DatabaseAdapter,
        path: str,
        collection: str = DEFAULT_COLLECTION,
        encoder: Callable[[int], str] = encode_key,
    ):
        self.path = path
        self.collection = collection
        self._engine = engine
        self._adapter = adapter
        self._session_maker = create_session_maker(engine)
        self._encoder = encoder
        self._closed = False
        # Serializes this handle's inserts in arrival order; the file lock
        # only arbitrates between processes.
        self._write_lock = asyncio.Lock()

    @classmethod
    async def open(
        cls,
        path: str,
        collection: str = DEFAULT_COLLECTION,
        busy_timeout: float = 5.0,
        encoder: Callable[[int], str] = encode_key,
    ) -> "SequenceKeyedStore":
        """
        Open or create the store file at path.

        Creates the tables if they are missing; the collection itself is
        created by the first insert.

        Raises:
            StorageError: If the file cannot be opened or the schema created
        """
        adapter = get_database_adapter(busy_timeout=busy_timeout)
        engine = None
        try:
            parent = Path(path).expanduser().parent
            parent.mkdir(parents=True, exist_ok=True)
            engine = adapter.create_engine(adapter.database_url(path))
            async with engine.begin() as conn:
                # Check-then-create under the writer lock, so concurrent
                # opens of a fresh file do not race on CREATE TABLE
                await adapter.begin_write(conn)
                await conn.run_sync(SQLModel.metadata.create_all)
        except (OSError, SQLAlchemyError) as e:
            if engine is not None:
                await engine.dispose()
            logger.error(f"Failed to open store at {path}: {e}")
            raise StorageError(f"Failed to open store at {path}: {e}", original_error=e)

        logger.info(f"Opened store at {path} (collection '{collection}')")
        return cls(engine, adapter, path, collection=collection, encoder=encoder)

    async def __aenter__(self) -> "SequenceKeyedStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageError(f"Store at {self.path} is closed")

    async def insert(self, target_url: str) -> str:
        """
        Store target_url under a freshly issued short key.

        Steps, all in one write transaction:
        1. Take the writer lock
        2. Advance the collection counter (create the collection on first use)
        3. Encode the new sequence number as a short key
        4. Write the serialized EntryRecord under that key
        5. Commit, then return the key

        Any failure rolls the transaction back, counter included.

        Raises:
            StorageError: If the database operation fails
            EncodeError: If the sequence number cannot be encoded
        """
        self._ensure_open()
        try:
            async with self._write_lock:
                async with session_scope(self._session_maker) as session:
                    await self._adapter.begin_write(session)
                    sequence = await self._next_sequence(session)
                    key = self._encoder(sequence)
                    record = EntryRecord(key=key, target_url=target_url)
                    session.add(Entry(collection=self.collection, key=key, value=record.to_bytes()))
                    await session.flush()
        except EncodeError:
            logger.error(f"Insert rolled back: could not encode sequence for {target_url}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Insert rolled back: {e}")
            raise StorageError(f"Failed to insert entry: {e}", original_error=e)

        logger.debug(f"Stored {key} -> {target_url} (sequence {sequence})")
        return key

    async def _next_sequence(self, session) -> int:
        result = await session.execute(
            update(Collection)
            .where(Collection.name == self.collection)
            .values(sequence=Collection.sequence + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            session.add(Collection(name=self.collection, sequence=COUNTER_ORIGIN))
            await session.flush()
            logger.info(f"Created collection '{self.collection}'")
            return COUNTER_ORIGIN

        result = await session.execute(
            select(Collection.sequence).where(Collection.name == self.collection)
        )
        return result.scalar_one()

    async def lookup(self, key: str) -> EntryRecord:
        """
        Read the entry stored under key.

        Raises:
            CollectionMissingError: If nothing was ever written to the collection
            ShortKeyNotFoundError: If the key is absent or its value is empty/corrupt
            StorageError: If the database operation fails
        """
        self._ensure_open()
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(Entry.value).where(
                        Entry.collection == self.collection,
                        Entry.key == key,
                    )
                )
                value: Optional[bytes] = result.scalar_one_or_none()

                if value is None:
                    exists = await session.execute(
                        select(Collection.name).where(Collection.name == self.collection)
                    )
                    if exists.scalar_one_or_none() is None:
                        raise CollectionMissingError(key, self.collection)
                    raise ShortKeyNotFoundError(key)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to look up '{key}': {e}", original_error=e)

        try:
            return EntryRecord.from_bytes(value)
        except ValueError as e:
            logger.warning(f"Unreadable entry for '{key}': {e}")
            raise ShortKeyNotFoundError(key)

    async def current_sequence(self) -> int:
        """
        Last sequence number handed out, 0 if the collection does not exist yet.
        """
        self._ensure_open()
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(Collection.sequence).where(Collection.name == self.collection)
                )
                return result.scalar_one_or_none() or 0
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read counter: {e}", original_error=e)

    async def close(self) -> None:
        """Release the database file. Calling close again is a no-op."""
        if self._closed:
            return
        self._closed = True
        await self._engine.dispose()
        logger.info(f"Closed store at {self.path}")
