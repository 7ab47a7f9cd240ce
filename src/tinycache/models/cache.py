from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class CacheNamespace(StrEnum):
    """Render variants that are cached separately for the same document."""

    CONTENT = "the_content"  # Emitted output, after the filter chain
    CONTENT_RETURN = "get_the_content"  # Returned output, raw body


class CacheLookup(BaseModel):
    """Result of a store read. ``found`` is authoritative, not ``value``."""

    value: str | None = None
    found: bool = False

    @classmethod
    def miss(cls) -> CacheLookup:
        return cls()

    @classmethod
    def hit(cls, value: str) -> CacheLookup:
        return cls(value=value, found=True)
