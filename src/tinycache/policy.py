"""Pure cache policy predicates.

Nothing in this module performs I/O: ``should_bypass`` runs on every
request before the store is touched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tinycache.models.document import DocumentStatus

if TYPE_CHECKING:
    from tinycache.models.document import Document
    from tinycache.models.request import RequestContext


def should_bypass(request: RequestContext, *, object_cache_available: bool) -> bool:
    """Return True when the request must not read or write the cache."""
    return (
        not object_cache_available
        or request.method.upper() != "GET"
        or not request.themed
        or request.authenticated
        or (
            request.is_search
            or request.is_404
            or request.is_feed
            or request.is_trackback
            or request.is_robots
            or request.is_preview
            or request.password_required
        )
        or request.do_not_cache
    )


def is_cacheable(document: Document | None) -> bool:
    """Only public documents are persisted: published and not password protected."""
    if document is None:
        return False
    return document.status == DocumentStatus.PUBLISH and not document.password_protected


def crosses_publish_boundary(new_status: str, old_status: str) -> bool:
    """True for a publish or an unpublish, False for every other transition."""
    publish = DocumentStatus.PUBLISH.value
    return (old_status == publish) != (new_status == publish)
