"""Render pipeline: a priority-ordered filter chain and the reference renderer.

Two render modes exist. ``render`` returns the raw document body, ``emit``
runs the body through the filter chain and writes the result to an output
callable. The modes may legitimately produce different text for the same
document, which is why they are cached under separate namespaces.
"""

from __future__ import annotations

import inspect
import itertools
import sys
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tinycache.documents import DocumentReader
    from tinycache.models.request import RenderOptions

ContentFilter = Callable[[str], "str | Awaitable[str]"]
Output = Callable[[str], None]

DEFAULT_PRIORITY = 10
LAST = sys.maxsize  # Runs after every other filter

MORE_TAG = "<!--more-->"
DEFAULT_MORE_LINK_TEXT = "(more&hellip;)"


class FilterChain:
    """Ordered content filters. Lower priority runs first, ties keep registration order."""

    def __init__(self) -> None:
        self._filters: list[tuple[int, int, ContentFilter]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._filters)

    def __contains__(self, content_filter: object) -> bool:
        return any(f == content_filter for _, _, f in self._filters)

    def add(self, content_filter: ContentFilter, priority: int = DEFAULT_PRIORITY) -> ContentFilter:
        self._filters.append((priority, next(self._seq), content_filter))
        self._filters.sort(key=lambda item: (item[0], item[1]))
        return content_filter

    def remove(self, content_filter: ContentFilter) -> bool:
        """Remove the first registration of ``content_filter``. Returns whether it was found."""
        for index, (_, _, registered) in enumerate(self._filters):
            if registered == content_filter:
                del self._filters[index]
                return True
        return False

    async def apply(self, content: str) -> str:
        for _, _, content_filter in list(self._filters):
            result = content_filter(content)
            if inspect.isawaitable(result):
                result = await result
            content = result
        return content


class Renderer(Protocol):
    """What the cache engine needs from the host renderer."""

    filters: FilterChain

    async def render(self, doc_id: int | None, options: RenderOptions) -> str:
        """Return the document content without running the filter chain."""
        ...

    async def emit(self, doc_id: int | None, options: RenderOptions, out: Output) -> None:
        """Run the content through the filter chain and write it to ``out``."""
        ...


class ContentRenderer:
    """Reference renderer over a document store.

    With ``full_view`` (single document pages) the whole body is rendered and
    the more tag becomes an anchor. Otherwise only the teaser is rendered,
    followed by a link to the anchor.
    """

    def __init__(
        self,
        documents: DocumentReader,
        filters: FilterChain | None = None,
        *,
        full_view: bool = True,
    ) -> None:
        self.documents = documents
        self.filters = filters if filters is not None else FilterChain()
        self.full_view = full_view

    async def render(self, doc_id: int | None, options: RenderOptions) -> str:
        if doc_id is None:
            return ""
        document = await self.documents.get(doc_id)
        if document is None:
            return ""

        body = document.body
        if MORE_TAG not in body:
            return body

        teaser, rest = body.split(MORE_TAG, 1)
        if not self.full_view:
            text = options.more_link_text or DEFAULT_MORE_LINK_TEXT
            return f'{teaser}<a href="#more-{doc_id}" class="more-link">{text}</a>'
        anchor = f'<span id="more-{doc_id}"></span>'
        if options.strip_teaser:
            return anchor + rest
        return teaser + anchor + rest

    async def emit(self, doc_id: int | None, options: RenderOptions, out: Output) -> None:
        content = await self.render(doc_id, options)
        out(await self.filters.apply(content))
