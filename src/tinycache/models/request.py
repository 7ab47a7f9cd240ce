from __future__ import annotations

from pydantic import BaseModel


class RenderOptions(BaseModel):
    """Options accepted by the renderer.

    The cache key does not encode options, so only the default set
    (no custom more-link text, teaser kept) is ever cached.
    """

    more_link_text: str | None = None
    strip_teaser: bool = False

    @property
    def is_default(self) -> bool:
        return self.more_link_text is None and self.strip_teaser is False


class RequestContext(BaseModel):
    """Signals the host knows about the current request."""

    doc_id: int | None = None
    method: str = "GET"
    themed: bool = True  # Came in through the front-end entry point
    authenticated: bool = False
    is_search: bool = False
    is_404: bool = False
    is_feed: bool = False
    is_trackback: bool = False
    is_robots: bool = False
    is_preview: bool = False
    password_required: bool = False
    do_not_cache: bool = False  # Escape hatch for checkout/cart style pages
