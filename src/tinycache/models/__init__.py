from __future__ import annotations

from tinycache.models.cache import CacheLookup, CacheNamespace
from tinycache.models.document import Document, DocumentStatus
from tinycache.models.events import DocumentMutated, MutationKind, StatusTransitioned
from tinycache.models.request import RenderOptions, RequestContext

__all__ = [
    # document
    "Document",
    "DocumentStatus",
    # cache
    "CacheNamespace",
    "CacheLookup",
    # request
    "RenderOptions",
    "RequestContext",
    # events
    "MutationKind",
    "DocumentMutated",
    "StatusTransitioned",
]
