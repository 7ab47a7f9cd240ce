from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from tinycache.models.cache import CacheLookup, CacheNamespace


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MemoryCacheStore:
    """Process-local store.

    Equivalent to running without an external object cache: entries are not
    shared between workers, so ``is_persistent`` is False and the engine
    bypasses caching when this store is configured.
    """

    is_persistent = False

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._entries: dict[tuple[str, str], tuple[str, datetime]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _live(self, slot: tuple[str, str]) -> str | None:
        entry = self._entries.get(slot)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[slot]
            return None
        return value

    async def get(self, key: int | str, namespace: CacheNamespace) -> CacheLookup:
        slot = (namespace.value, str(key))
        value = self._live(slot)
        if value is None:
            return CacheLookup.miss()
        return CacheLookup.hit(value)

    async def add(
        self, key: int | str, value: str, namespace: CacheNamespace, ttl: timedelta
    ) -> bool:
        slot = (namespace.value, str(key))
        if self._live(slot) is not None:
            return False
        self._entries[slot] = (value, self._clock() + ttl)
        return True

    async def delete(self, key: int | str, namespace: CacheNamespace) -> None:
        self._entries.pop((namespace.value, str(key)), None)
