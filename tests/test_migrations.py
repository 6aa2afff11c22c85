"""Alembic migrations produce a schema the store can use."""

import asyncio
import sqlite3
from pathlib import Path

from alembic import command
from alembic.config import Config

from urlcutter.core.setting import settings
from urlcutter.db.store import SequenceKeyedStore

ROOT = Path(__file__).resolve().parent.parent


def test_upgrade_head_creates_store_schema(db_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_PATH", db_path)
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "migrations"))

    command.upgrade(config, "head")

    with sqlite3.connect(db_path) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"collections", "entries", "alembic_version"} <= tables

    async def insert_and_read():
        async with await SequenceKeyedStore.open(db_path) as store:
            key = await store.insert("http://example.com/migrated")
            return key, (await store.lookup(key)).target_url

    assert asyncio.run(insert_and_read()) == ("2", "http://example.com/migrated")
