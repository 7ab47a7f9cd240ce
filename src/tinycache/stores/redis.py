"""Redis object cache (``backend: redis``).

Suitable for multi-process deployments. ``add`` maps onto ``SET NX EX`` so
first-writer-wins and expiry are both enforced by Redis itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from tinycache.models.cache import CacheLookup

if TYPE_CHECKING:
    from datetime import timedelta

    from tinycache.models.cache import CacheNamespace

log = structlog.get_logger()


class RedisCacheStore:
    """Redis-backed store implementing CacheStore."""

    is_persistent = True

    def __init__(self, client: redis.Redis, key_prefix: str = "tinycache:") -> None:
        self._client = client
        self._prefix = key_prefix

    @classmethod
    def from_url(cls, redis_url: str, key_prefix: str = "tinycache:") -> RedisCacheStore:
        client = redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, key_prefix=key_prefix)

    def _key(self, key: int | str, namespace: CacheNamespace) -> str:
        return f"{self._prefix}{namespace.value}:{key}"

    async def get(self, key: int | str, namespace: CacheNamespace) -> CacheLookup:
        try:
            value = await self._client.get(self._key(key, namespace))
        except RedisError:
            log.warning("cache_read_error", key=self._key(key, namespace), exc_info=True)
            return CacheLookup.miss()
        if value is None:
            return CacheLookup.miss()
        return CacheLookup.hit(value)

    async def add(
        self, key: int | str, value: str, namespace: CacheNamespace, ttl: timedelta
    ) -> bool:
        seconds = max(1, int(ttl.total_seconds()))
        try:
            written = await self._client.set(self._key(key, namespace), value, nx=True, ex=seconds)
        except RedisError:
            log.warning("cache_write_error", key=self._key(key, namespace), exc_info=True)
            return False
        return bool(written)

    async def delete(self, key: int | str, namespace: CacheNamespace) -> None:
        try:
            await self._client.delete(self._key(key, namespace))
        except RedisError:
            log.warning("cache_delete_error", key=self._key(key, namespace), exc_info=True)

    async def close(self) -> None:
        await self._client.aclose()
