"""Factory for cache store instantiation."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tinycache.config import CacheSettings
    from tinycache.stores.base import CacheStore

log = structlog.get_logger()


@asynccontextmanager
async def open_cache_store(settings: CacheSettings) -> AsyncIterator[CacheStore]:
    """Open the configured backend for the lifetime of the ``async with`` block.

    Raises:
        ValueError: the backend name is unknown.
    """
    backend = settings.backend

    if backend == "memory":
        from tinycache.stores.memory import MemoryCacheStore

        log.info("cache_store_opened", backend=backend, persistent=False)
        yield MemoryCacheStore()
        return

    if backend == "sqlite":
        from tinycache.stores.sqlite import SqliteCacheStore

        db_path = Path(settings.db_path).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(db_path) as db:
            store = SqliteCacheStore(db)
            await store.init_db()
            await store.cleanup_if_due(settings.cleanup_interval_hours)
            log.info("cache_store_opened", backend=backend, db_path=str(db_path))
            yield store
        return

    if backend == "redis":
        from tinycache.stores.redis import RedisCacheStore

        redis_store = RedisCacheStore.from_url(settings.redis_url, key_prefix=settings.key_prefix)
        log.info("cache_store_opened", backend=backend)
        try:
            yield redis_store
        finally:
            await redis_store.close()
        return

    raise ValueError(f"Unsupported cache backend: {backend!r}")
