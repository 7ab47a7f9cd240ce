"""Capture the final output of the filter chain for a single render."""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING

import structlog

from tinycache.marker import generation_marker
from tinycache.models.cache import CacheNamespace
from tinycache.pipeline import LAST

if TYPE_CHECKING:
    from contextvars import Token
    from datetime import timedelta
    from types import TracebackType

    from tinycache.pipeline import FilterChain
    from tinycache.stores.base import CacheStore

log = structlog.get_logger()

# The interceptor guarding the render running in the current task. The filter
# chain is shared between requests, so a capture filter only fires when its
# own interceptor is the active one.
_active: ContextVar[RenderInterceptor | None] = ContextVar("tinycache_interceptor", default=None)


class RenderInterceptor:
    """One-shot guard around a single ``emit`` call.

    While active, a filter registered after every other filter stores the
    fully filtered output under ``(doc_id, CONTENT)`` and passes it through
    unchanged. Renders running concurrently in other tasks pass through the
    filter untouched. The filter is removed on exit, whether the render
    succeeded or raised.
    """

    def __init__(
        self,
        filters: FilterChain,
        store: CacheStore,
        doc_id: int,
        ttl: timedelta,
    ) -> None:
        self._filters = filters
        self._store = store
        self._doc_id = doc_id
        self._ttl = ttl
        self._used = False
        self._token: Token[RenderInterceptor | None] | None = None
        self.captured: str | None = None

    async def _capture(self, content: str) -> str:
        if _active.get() is not self:
            return content
        self.captured = content
        written = await self._store.add(
            self._doc_id, content + generation_marker(), CacheNamespace.CONTENT, self._ttl
        )
        log.debug(
            "cache_store",
            doc_id=self._doc_id,
            namespace=CacheNamespace.CONTENT.value,
            written=written,
        )
        return content

    async def __aenter__(self) -> RenderInterceptor:
        if self._used:
            raise RuntimeError("RenderInterceptor is single use")
        self._used = True
        self._token = _active.set(self)
        self._filters.add(self._capture, priority=LAST)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._filters.remove(self._capture)
        if self._token is not None:
            _active.reset(self._token)
            self._token = None
