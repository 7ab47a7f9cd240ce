from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class MutationKind(StrEnum):
    SAVED = "saved"
    EDITED = "edited"
    DELETED = "deleted"
    TRASHED = "trashed"
    CACHE_CLEARED = "cache_cleared"


class DocumentMutated(BaseModel):
    """A document was written, removed, or had its caches cleared."""

    kind: MutationKind
    doc_id: int


class StatusTransitioned(BaseModel):
    """A document moved between lifecycle statuses.

    Statuses are plain strings: hosts emit pseudo-statuses such as ``new``
    for documents that did not exist before.
    """

    new_status: str
    old_status: str
    doc_id: int
