"""Shared fixtures: event bus, documents, renderer, and a recording store."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from tinycache.documents import InMemoryDocumentStore
from tinycache.engine import ContentCache
from tinycache.events import EventBus
from tinycache.invalidation import InvalidationListener
from tinycache.models.document import Document, DocumentStatus
from tinycache.pipeline import ContentRenderer
from tinycache.stores.memory import MemoryCacheStore

if TYPE_CHECKING:
    from tinycache.models.cache import CacheLookup, CacheNamespace
    from tinycache.models.request import RenderOptions
    from tinycache.pipeline import Output


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class RecordingStore(MemoryCacheStore):
    """Memory store that claims to be persistent and records every call."""

    is_persistent = True

    def __init__(self, clock: FakeClock) -> None:
        super().__init__(clock)
        self.calls: list[tuple[str, str, str]] = []

    async def get(self, key: int | str, namespace: CacheNamespace) -> CacheLookup:
        self.calls.append(("get", str(key), namespace.value))
        return await super().get(key, namespace)

    async def add(
        self, key: int | str, value: str, namespace: CacheNamespace, ttl: timedelta
    ) -> bool:
        self.calls.append(("add", str(key), namespace.value))
        return await super().add(key, value, namespace, ttl)

    async def delete(self, key: int | str, namespace: CacheNamespace) -> None:
        self.calls.append(("delete", str(key), namespace.value))
        await super().delete(key, namespace)

    def peek(self, key: int | str, namespace: CacheNamespace) -> str | None:
        entry = self._entries.get((namespace.value, str(key)))
        return entry[0] if entry else None


class CountingRenderer(ContentRenderer):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.render_calls = 0
        self.emit_calls = 0

    async def render(self, doc_id: int | None, options: RenderOptions) -> str:
        self.render_calls += 1
        await asyncio.sleep(0)  # Let concurrent requests interleave
        return await super().render(doc_id, options)

    async def emit(self, doc_id: int | None, options: RenderOptions, out: Output) -> None:
        self.emit_calls += 1
        await super().emit(doc_id, options, out)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def documents(bus: EventBus) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(bus)


@pytest.fixture()
def store(clock: FakeClock) -> RecordingStore:
    return RecordingStore(clock)


@pytest.fixture()
def renderer(documents: InMemoryDocumentStore) -> CountingRenderer:
    return CountingRenderer(documents)


@pytest.fixture()
def engine(
    store: RecordingStore, documents: InMemoryDocumentStore, renderer: CountingRenderer
) -> ContentCache:
    return ContentCache(store, documents, renderer)


@pytest.fixture()
def listener(store: RecordingStore, bus: EventBus) -> InvalidationListener:
    listener = InvalidationListener(store)
    listener.start(bus)
    yield listener
    listener.stop()


@pytest.fixture()
async def published(documents: InMemoryDocumentStore) -> Document:
    """Document 42, published, no password."""
    return await documents.save(
        Document(id=42, status=DocumentStatus.PUBLISH, title="Hello", body="Hello World")
    )
