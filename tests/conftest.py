"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; keep the module-level app quiet.
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from urlcutter.core.setting import Settings
from urlcutter.db.store import SequenceKeyedStore
from urlcutter.main import create_app


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "urlcutter.db")


@pytest_asyncio.fixture
async def store(db_path):
    """Open store on a fresh file, closed after the test."""
    store = await SequenceKeyedStore.open(db_path)
    yield store
    await store.close()


@pytest.fixture
def test_settings(db_path) -> Settings:
    return Settings(
        DATABASE_PATH=db_path,
        BASE_URL="http://short.test",
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture
def client(test_settings):
    """TestClient running the app lifespan (store opened and closed)."""
    with TestClient(create_app(test_settings)) as client:
        yield client


@pytest.fixture
def sample_urls():
    return [
        "http://example.com",
        "https://www.example.com/path/to/page",
        "http://subdomain.example.com:8080/path?query=value",
        "https://example.org/a#fragment",
    ]
