"""Tests for the sequence-keyed store."""

import asyncio
import sqlite3
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from urlcutter.core.exceptions import (
    CollectionMissingError,
    EncodeError,
    ShortKeyNotFoundError,
    StorageError,
)
from urlcutter.core.key_codec import decode_key, encode_key
from urlcutter.db.models import COUNTER_ORIGIN, EntryRecord
from urlcutter.db.store import SequenceKeyedStore


@pytest.mark.asyncio
async def test_insert_then_lookup(store):
    key = await store.insert("http://example.com")
    entry = await store.lookup(key)

    assert entry.key == key
    assert entry.target_url == "http://example.com"


@pytest.mark.asyncio
async def test_first_key_uses_counter_origin(store):
    assert COUNTER_ORIGIN == 1
    assert await store.insert("http://example.com") == encode_key(1) == "2"


@pytest.mark.asyncio
async def test_sequential_inserts_are_gapless(store, sample_urls):
    keys = [await store.insert(url) for url in sample_urls * 5]

    assert [decode_key(k) for k in keys] == list(range(1, len(keys) + 1))
    assert await store.current_sequence() == len(keys)


@pytest.mark.asyncio
async def test_burst_of_concurrent_inserts_all_succeed(store):
    urls = [f"http://example.com/{i}" for i in range(300)]

    keys = await asyncio.gather(*(store.insert(url) for url in urls))

    assert len(set(keys)) == len(urls)
    assert sorted(decode_key(k) for k in keys) == list(range(1, len(urls) + 1))
    for key, url in zip(keys, urls):
        entry = await store.lookup(key)
        assert entry.target_url == url


@pytest.mark.asyncio
async def test_lookups_run_alongside_inserts(store):
    first = await store.insert("http://example.com/first")

    async def read_first():
        return (await store.lookup(first)).target_url

    results = await asyncio.gather(
        *(store.insert(f"http://example.com/{i}") for i in range(10)),
        *(read_first() for _ in range(10)),
    )

    assert results[10:] == ["http://example.com/first"] * 10


@pytest.mark.asyncio
async def test_lookup_before_any_write_reports_missing_collection(store):
    with pytest.raises(CollectionMissingError):
        await store.lookup("2")


@pytest.mark.asyncio
async def test_lookup_of_never_issued_key(store):
    await store.insert("http://example.com")

    with pytest.raises(ShortKeyNotFoundError) as exc_info:
        await store.lookup("zzzz")
    assert not isinstance(exc_info.value, CollectionMissingError)


@pytest.mark.asyncio
async def test_corrupt_value_is_reported_as_not_found(store, db_path):
    await store.insert("http://example.com")

    with sqlite3.connect(db_path) as conn:
        conn.execute(
            'INSERT INTO entries (collection, "key", value) VALUES (?, ?, ?)',
            (store.collection, "bad", b"{not json"),
        )
        conn.execute(
            'INSERT INTO entries (collection, "key", value) VALUES (?, ?, ?)',
            (store.collection, "empty", b""),
        )

    for key in ("bad", "empty"):
        with pytest.raises(ShortKeyNotFoundError):
            await store.lookup(key)


@pytest.mark.asyncio
async def test_failed_insert_rolls_back_counter(db_path):
    def encode_until_two(number):
        if number == 2:
            raise EncodeError(number)
        return encode_key(number)

    async with await SequenceKeyedStore.open(db_path, encoder=encode_until_two) as store:
        assert await store.insert("http://example.com/1") == "2"

        with pytest.raises(EncodeError):
            await store.insert("http://example.com/2")
        with pytest.raises(EncodeError):
            await store.insert("http://example.com/2")

        assert await store.current_sequence() == 1


@pytest.mark.asyncio
async def test_failed_first_insert_does_not_create_collection(db_path):
    def always_fail(number):
        raise EncodeError(number)

    async with await SequenceKeyedStore.open(db_path, encoder=always_fail) as store:
        with pytest.raises(EncodeError):
            await store.insert("http://example.com")

        assert await store.current_sequence() == 0
        with pytest.raises(CollectionMissingError):
            await store.lookup("2")


@pytest.mark.asyncio
async def test_entries_survive_reopen(db_path):
    store = await SequenceKeyedStore.open(db_path)
    key = await store.insert("http://example.com/durable")
    await store.close()

    reopened = await SequenceKeyedStore.open(db_path)
    try:
        entry = await reopened.lookup(key)
        assert entry.target_url == "http://example.com/durable"
        # Counter state is durable too: no key is issued twice
        assert decode_key(await reopened.insert("http://example.com/next")) == decode_key(key) + 1
    finally:
        await reopened.close()


@pytest.mark.asyncio
async def test_collections_are_independent(db_path):
    async with await SequenceKeyedStore.open(db_path, collection="a") as a, \
            await SequenceKeyedStore.open(db_path, collection="b") as b:
        key_a = await a.insert("http://a.example.com")
        key_b = await b.insert("http://b.example.com")

        assert key_a == key_b == "2"
        assert (await a.lookup(key_a)).target_url == "http://a.example.com"
        assert (await b.lookup(key_b)).target_url == "http://b.example.com"


@pytest.mark.asyncio
async def test_closed_store_rejects_operations(db_path):
    store = await SequenceKeyedStore.open(db_path)
    await store.close()
    await store.close()

    assert store.closed
    with pytest.raises(StorageError):
        await store.insert("http://example.com")
    with pytest.raises(StorageError):
        await store.lookup("2")


@pytest.mark.asyncio
async def test_write_lock_held_elsewhere_fails_without_retry(db_path):
    async with await SequenceKeyedStore.open(db_path, busy_timeout=0.2) as store:
        other = sqlite3.connect(db_path, isolation_level=None)
        try:
            other.execute("BEGIN IMMEDIATE")

            started = time.monotonic()
            with pytest.raises(StorageError):
                await store.insert("http://example.com/blocked")
            assert time.monotonic() - started < 2.0

            # Readers are not blocked by a pending writer
            assert await store.current_sequence() == 0

            other.execute("ROLLBACK")
        finally:
            other.close()

        # The failed insert consumed nothing
        assert await store.insert("http://example.com") == "2"


def test_concurrent_opens_of_a_fresh_file(db_path):
    async def open_and_close():
        store = await SequenceKeyedStore.open(db_path)
        await store.close()

    with ThreadPoolExecutor(max_workers=6) as pool:
        futures = [pool.submit(lambda: asyncio.run(open_and_close())) for _ in range(6)]
        for future in futures:
            future.result()

    with sqlite3.connect(db_path) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"collections", "entries"} <= tables


@pytest.mark.asyncio
async def test_open_failure_raises_storage_error(tmp_path):
    # A directory cannot be opened as a database file
    with pytest.raises(StorageError):
        await SequenceKeyedStore.open(str(tmp_path))


def test_entry_record_serialization():
    record = EntryRecord(key="2", target_url="http://example.com")
    data = record.to_bytes()

    assert b'"v":1' in data
    assert EntryRecord.from_bytes(data) == record
    with pytest.raises(ValueError):
        EntryRecord.from_bytes(b"")
    with pytest.raises(ValueError):
        EntryRecord.from_bytes(b'{"v": 2, "key": "2", "target_url": "http://x"}')
