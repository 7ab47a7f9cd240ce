"""Unit-specific fixtures (no I/O beyond in-memory SQLite)."""

from __future__ import annotations

import aiosqlite
import pytest

from tinycache.stores.sqlite import SqliteCacheStore


@pytest.fixture()
async def sqlite_store():
    """In-memory SQLite store for unit tests."""
    async with aiosqlite.connect(":memory:") as db:
        s = SqliteCacheStore(db)
        await s.init_db()
        yield s
