"""End-to-end scenarios: render, cache, mutate, invalidate."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tinycache.config import Settings
from tinycache.models.cache import CacheNamespace
from tinycache.models.document import Document, DocumentStatus
from tinycache.models.events import DocumentMutated, StatusTransitioned
from tinycache.models.request import RequestContext
from tinycache.state import create_app_state

if TYPE_CHECKING:
    from tinycache.state import AppState

MARKER_PREFIX = "<!-- Cached content generated by tinycache on "
REQUEST = RequestContext(doc_id=42)


async def _publish_42(state: AppState) -> None:
    await state.documents.save(
        Document(id=42, status=DocumentStatus.PUBLISH, body="Hello World")
    )


class TestRenderReturnScenario:
    async def test_cold_cache_then_hit(self, app_state: AppState) -> None:
        await _publish_42(app_state)

        first = await app_state.cache.render_return(REQUEST)
        assert first == "Hello World"
        stored = await app_state.store.get(42, CacheNamespace.CONTENT_RETURN)
        assert stored.found is True

        # Served from the store even though the body changed underneath
        # without a lifecycle event.
        app_state.documents._documents[42] = Document(
            id=42, status=DocumentStatus.PUBLISH, body="Changed"
        )
        second = await app_state.cache.render_return(REQUEST)
        assert second.startswith("Hello World" + MARKER_PREFIX)

    async def test_trashing_invalidates(self, app_state: AppState) -> None:
        await _publish_42(app_state)
        await app_state.cache.render_return(REQUEST)

        await app_state.documents.trash(42)

        assert (await app_state.store.get(42, CacheNamespace.CONTENT_RETURN)).found is False
        assert await app_state.cache.render_return(REQUEST) == "Hello World"
        # Trashed documents are rendered but not stored.
        assert (await app_state.store.get(42, CacheNamespace.CONTENT_RETURN)).found is False

    async def test_transition_event_alone_invalidates(self, app_state: AppState) -> None:
        await _publish_42(app_state)
        await app_state.cache.render_return(REQUEST)

        await app_state.bus.publish(
            StatusTransitioned(new_status="trash", old_status="publish", doc_id=42)
        )

        assert (await app_state.store.get(42, CacheNamespace.CONTENT_RETURN)).found is False

    async def test_edit_shows_new_content(self, app_state: AppState) -> None:
        await _publish_42(app_state)
        await app_state.cache.render_return(REQUEST)

        await app_state.documents.edit(42, body="Goodbye World")

        assert await app_state.cache.render_return(REQUEST) == "Goodbye World"


class TestRenderEmitScenario:
    async def test_emit_caches_filtered_output(self, app_state: AppState) -> None:
        await _publish_42(app_state)
        app_state.renderer.filters.add(lambda s: f"<p>{s}</p>")
        written: list[str] = []

        await app_state.cache.render_emit(REQUEST, written.append)
        await app_state.cache.render_emit(REQUEST, written.append)

        assert written[0] == "<p>Hello World</p>"
        assert written[1].startswith("<p>Hello World</p>" + MARKER_PREFIX)

    async def test_publish_unpublish_round_trip(self, app_state: AppState) -> None:
        await app_state.documents.save(
            Document(id=42, status=DocumentStatus.DRAFT, body="Hello World")
        )
        written: list[str] = []

        await app_state.cache.render_emit(REQUEST, written.append)
        assert (await app_state.store.get(42, CacheNamespace.CONTENT)).found is False

        await app_state.documents.set_status(42, DocumentStatus.PUBLISH)
        await app_state.cache.render_emit(REQUEST, written.append)
        assert (await app_state.store.get(42, CacheNamespace.CONTENT)).found is True

        await app_state.documents.set_status(42, DocumentStatus.DRAFT)
        assert (await app_state.store.get(42, CacheNamespace.CONTENT)).found is False


class TestWiring:
    async def test_host_logging_left_alone(self) -> None:
        root = logging.getLogger()
        host_handler = logging.NullHandler()
        root.addHandler(host_handler)
        try:
            settings = {"cache": {"backend": "memory"}, "logging": {"level": "ERROR"}}
            async with create_app_state(Settings(**settings)):
                assert host_handler in root.handlers
            assert host_handler in root.handlers
        finally:
            root.removeHandler(host_handler)

    async def test_listener_unsubscribed_on_exit(self) -> None:
        settings = {"cache": {"backend": "memory"}, "logging": {"level": "ERROR"}}
        async with create_app_state(Settings(**settings)) as state:
            bus = state.bus
            assert bus.handler_count(DocumentMutated) == 1
        assert bus.handler_count(DocumentMutated) == 0
        assert not state.listener.running

    async def test_memory_backend_never_caches(self) -> None:
        settings = {"cache": {"backend": "memory"}, "logging": {"level": "ERROR"}}
        async with create_app_state(Settings(**settings)) as state:
            await _publish_42(state)
            await state.cache.render_return(REQUEST)
            assert (await state.store.get(42, CacheNamespace.CONTENT_RETURN)).found is False
