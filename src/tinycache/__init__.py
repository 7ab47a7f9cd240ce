"""Read-through cache for rendered document content."""

from __future__ import annotations

from tinycache.engine import ContentCache
from tinycache.events import EventBus
from tinycache.invalidation import InvalidationListener
from tinycache.models import CacheNamespace, RenderOptions, RequestContext
from tinycache.policy import should_bypass
from tinycache.state import AppState, create_app_state

__version__ = "0.7.0"

__all__ = [
    "AppState",
    "CacheNamespace",
    "ContentCache",
    "EventBus",
    "InvalidationListener",
    "RenderOptions",
    "RequestContext",
    "create_app_state",
    "should_bypass",
]
