"""Shared test fixtures."""

import pytest

from speki.app import App
from speki.cache import CacheIndex
from speki.db import init_db
from speki.store import CardStore


@pytest.fixture
def share_dir(tmp_path):
    """Temporary speki share directory with an empty cards/ root."""
    d = tmp_path / "speki"
    (d / "cards").mkdir(parents=True)
    return d


@pytest.fixture
def store(share_dir):
    return CardStore(share_dir / "cards")


@pytest.fixture
def db_conn():
    """In-memory SQLite cache database with schema applied."""
    conn = init_db(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def cache(db_conn, store):
    return CacheIndex(db_conn, store)


@pytest.fixture
def app(share_dir):
    """App instance with tmp share dir and in-memory cache."""
    a = App(share_dir=share_dir)
    a.init_cache(":memory:")
    yield a
    a.close()
