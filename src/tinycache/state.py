"""Process-wide wiring of the cache components."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from tinycache.documents import InMemoryDocumentStore
from tinycache.engine import ContentCache
from tinycache.events import EventBus
from tinycache.invalidation import InvalidationListener
from tinycache.logs import setup_logging
from tinycache.pipeline import ContentRenderer
from tinycache.stores.factory import open_cache_store

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tinycache.config import Settings
    from tinycache.documents import DocumentReader
    from tinycache.pipeline import Renderer
    from tinycache.stores.base import CacheStore

log = structlog.get_logger()


@dataclass
class AppState:
    settings: Settings
    bus: EventBus
    store: CacheStore
    documents: DocumentReader
    renderer: Renderer
    cache: ContentCache
    listener: InvalidationListener


@asynccontextmanager
async def create_app_state(
    settings: Settings,
    *,
    bus: EventBus | None = None,
    documents: DocumentReader | None = None,
    renderer: Renderer | None = None,
    configure_logging: bool = False,
) -> AsyncIterator[AppState]:
    """Open the store, subscribe the invalidation listener, and tear both down on exit.

    Without a host document store an ``InMemoryDocumentStore`` on ``bus`` is
    used, and without a renderer a ``ContentRenderer`` over the documents.
    """
    if configure_logging:
        setup_logging(settings.logging)
    if bus is None:
        bus = EventBus()
    if documents is None:
        documents = InMemoryDocumentStore(bus)
    if renderer is None:
        renderer = ContentRenderer(documents)

    async with open_cache_store(settings.cache) as store:
        listener = InvalidationListener(store)
        listener.start(bus)
        state = AppState(
            settings=settings,
            bus=bus,
            store=store,
            documents=documents,
            renderer=renderer,
            cache=ContentCache(store, documents, renderer, ttl=settings.cache.ttl),
            listener=listener,
        )
        log.info(
            "tinycache_started",
            backend=settings.cache.backend,
            ttl_hours=settings.cache.ttl_hours,
        )
        try:
            yield state
        finally:
            listener.stop()
            log.info("tinycache_stopped")
