from __future__ import annotations

from tinycache.stores.base import CacheStore
from tinycache.stores.factory import open_cache_store
from tinycache.stores.memory import MemoryCacheStore
from tinycache.stores.redis import RedisCacheStore
from tinycache.stores.sqlite import SqliteCacheStore

__all__ = [
    "CacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "SqliteCacheStore",
    "open_cache_store",
]
