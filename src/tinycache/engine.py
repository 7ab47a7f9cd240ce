"""Read-through cache for rendered document content.

Each render request takes one of three paths:

  1. bypass: no document id, non-default options, or a request the policy
     refuses to cache. The renderer runs directly, the store is not touched.
  2. hit: the stored value is returned or emitted verbatim and the renderer
     is not invoked.
  3. miss: the renderer runs; the output is stored only if the document is
     published and not password protected at write time.

Store failures never surface here, the adapters degrade them to a miss or a
skipped write. Concurrent misses for the same document may both render;
``add`` keeps the first value and each caller still gets its own output.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import structlog

from tinycache.interceptor import RenderInterceptor
from tinycache.marker import generation_marker
from tinycache.models.cache import CacheNamespace
from tinycache.models.request import RenderOptions
from tinycache.policy import is_cacheable, should_bypass

if TYPE_CHECKING:
    from tinycache.documents import DocumentReader
    from tinycache.models.request import RequestContext
    from tinycache.pipeline import Output, Renderer
    from tinycache.stores.base import CacheStore

log = structlog.get_logger()

DEFAULT_TTL = timedelta(days=1)


class ContentCache:
    def __init__(
        self,
        store: CacheStore,
        documents: DocumentReader,
        renderer: Renderer,
        *,
        ttl: timedelta = DEFAULT_TTL,
    ) -> None:
        self.store = store
        self.documents = documents
        self.renderer = renderer
        self.ttl = ttl

    def _cached_doc_id(self, request: RequestContext, options: RenderOptions) -> int | None:
        """Document id to cache under, or None when the request bypasses the cache."""
        doc_id = request.doc_id
        if doc_id is None:
            log.debug("cache_bypass", reason="no_doc_id")
            return None
        if not options.is_default:
            log.debug("cache_bypass", doc_id=doc_id, reason="options")
            return None
        if should_bypass(request, object_cache_available=self.store.is_persistent):
            log.debug("cache_bypass", doc_id=doc_id, reason="request")
            return None
        return doc_id

    async def _eligible(self, doc_id: int) -> bool:
        # Checked again at write time: the document may have changed since the
        # request was classified.
        return is_cacheable(await self.documents.get(doc_id))

    async def render_emit(
        self,
        request: RequestContext,
        out: Output,
        options: RenderOptions | None = None,
    ) -> None:
        """Emit the content of ``request.doc_id``, from the cache when possible."""
        options = options or RenderOptions()
        doc_id = self._cached_doc_id(request, options)
        if doc_id is None:
            await self.renderer.emit(request.doc_id, options, out)
            return

        cached = await self.store.get(doc_id, CacheNamespace.CONTENT)
        if cached.found:
            log.debug("cache_hit", doc_id=doc_id, namespace=CacheNamespace.CONTENT.value)
            out(cached.value or "")
            return

        log.debug("cache_miss", doc_id=doc_id, namespace=CacheNamespace.CONTENT.value)
        if not await self._eligible(doc_id):
            await self.renderer.emit(doc_id, options, out)
            return

        async with RenderInterceptor(self.renderer.filters, self.store, doc_id, self.ttl):
            await self.renderer.emit(doc_id, options, out)

    async def render_return(
        self,
        request: RequestContext,
        options: RenderOptions | None = None,
    ) -> str:
        """Return the content of ``request.doc_id``, from the cache when possible.

        A value served from the cache carries the generation marker; a freshly
        rendered one does not.
        """
        options = options or RenderOptions()
        doc_id = self._cached_doc_id(request, options)
        if doc_id is None:
            return await self.renderer.render(request.doc_id, options)

        cached = await self.store.get(doc_id, CacheNamespace.CONTENT_RETURN)
        if cached.found:
            log.debug("cache_hit", doc_id=doc_id, namespace=CacheNamespace.CONTENT_RETURN.value)
            return cached.value or ""

        log.debug("cache_miss", doc_id=doc_id, namespace=CacheNamespace.CONTENT_RETURN.value)
        eligible = await self._eligible(doc_id)
        content = await self.renderer.render(doc_id, options)
        if eligible:
            written = await self.store.add(
                doc_id,
                content + generation_marker(),
                CacheNamespace.CONTENT_RETURN,
                self.ttl,
            )
            log.debug(
                "cache_store",
                doc_id=doc_id,
                namespace=CacheNamespace.CONTENT_RETURN.value,
                written=written,
            )
        return content
