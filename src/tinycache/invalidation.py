"""Delete cached content when documents change.

Direct mutations (save, edit, delete, trash, cache clear) always invalidate.
Status transitions invalidate only when they cross the publish boundary.
Every namespace of the document is dropped, so both render modes go cold
together. Deletes are fire-and-forget: a failed delete leaves a stale entry
that expires with its TTL.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from tinycache.models.cache import CacheNamespace
from tinycache.models.events import DocumentMutated, StatusTransitioned
from tinycache.policy import crosses_publish_boundary

if TYPE_CHECKING:
    from tinycache.events import EventBus, Subscription
    from tinycache.stores.base import CacheStore

log = structlog.get_logger()


class InvalidationListener:
    def __init__(self, store: CacheStore) -> None:
        self.store = store
        self._subscriptions: list[Subscription] = []

    @property
    def running(self) -> bool:
        return bool(self._subscriptions)

    def start(self, bus: EventBus) -> None:
        """Subscribe to lifecycle events on ``bus``."""
        if self._subscriptions:
            raise RuntimeError("InvalidationListener is already subscribed")
        self._subscriptions = [
            bus.subscribe(DocumentMutated, self.on_mutation),
            bus.subscribe(StatusTransitioned, self._on_transition_event),
        ]

    def stop(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []

    async def invalidate(self, doc_id: int) -> None:
        for namespace in CacheNamespace:
            await self.store.delete(doc_id, namespace)
        log.debug("cache_invalidated", doc_id=doc_id)

    async def on_mutation(self, event: DocumentMutated) -> None:
        await self.invalidate(event.doc_id)

    async def on_transition(self, new_status: str, old_status: str, doc_id: int) -> None:
        if crosses_publish_boundary(new_status, old_status):
            await self.invalidate(doc_id)

    async def _on_transition_event(self, event: StatusTransitioned) -> None:
        await self.on_transition(event.new_status, event.old_status, event.doc_id)
