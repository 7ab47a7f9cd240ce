"""Cache store contract consumed by the engine and the invalidation listener."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import timedelta

    from tinycache.models.cache import CacheLookup, CacheNamespace


@runtime_checkable
class CacheStore(Protocol):
    """Key-value store with per-entry TTL.

    Implementations never raise on backend failures: reads degrade to a miss,
    writes and deletes to a logged no-op.
    """

    @property
    def is_persistent(self) -> bool:
        """True when entries outlive the process and are shared between workers."""
        ...

    async def get(self, key: int | str, namespace: CacheNamespace) -> CacheLookup:
        """Read an entry. Expired entries are reported as not found."""
        ...

    async def add(
        self, key: int | str, value: str, namespace: CacheNamespace, ttl: timedelta
    ) -> bool:
        """Store ``value`` unless a live entry exists. Returns whether it was written."""
        ...

    async def delete(self, key: int | str, namespace: CacheNamespace) -> None:
        """Remove an entry. Deleting a missing key is not an error."""
        ...
