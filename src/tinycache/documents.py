"""Document access.

``DocumentReader`` is all the cache engine needs. ``InMemoryDocumentStore`` is
a small host-side store that publishes lifecycle events on every write, for
tests and for hosts without a document store of their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from tinycache.models.document import Document, DocumentStatus
from tinycache.models.events import DocumentMutated, MutationKind, StatusTransitioned

if TYPE_CHECKING:
    from tinycache.events import EventBus

NEW_STATUS = "new"  # Old status reported for documents that did not exist yet


class DocumentReader(Protocol):
    async def get(self, doc_id: int) -> Document | None: ...


@dataclass
class InMemoryDocumentStore:
    bus: EventBus
    _documents: dict[int, Document] = field(default_factory=dict)

    async def get(self, doc_id: int) -> Document | None:
        return self._documents.get(doc_id)

    async def save(self, document: Document) -> Document:
        """Insert or replace a document.

        Publishes the status transition first (when the status changed or the
        document is new), then ``saved``.
        """
        previous = self._documents.get(document.id)
        self._documents[document.id] = document
        old_status = previous.status.value if previous is not None else NEW_STATUS
        if old_status != document.status.value:
            await self.bus.publish(
                StatusTransitioned(
                    new_status=document.status.value,
                    old_status=old_status,
                    doc_id=document.id,
                )
            )
        await self.bus.publish(DocumentMutated(kind=MutationKind.SAVED, doc_id=document.id))
        return document

    async def edit(self, doc_id: int, **changes: Any) -> Document:
        """Apply field changes to an existing document.

        Raises:
            KeyError: no document with ``doc_id``.
        """
        current = self._documents[doc_id]
        updated = current.model_copy(update=changes)
        await self.bus.publish(DocumentMutated(kind=MutationKind.EDITED, doc_id=doc_id))
        return await self.save(updated)

    async def set_status(self, doc_id: int, status: DocumentStatus) -> Document:
        return await self.edit(doc_id, status=status)

    async def trash(self, doc_id: int) -> Document:
        await self.bus.publish(DocumentMutated(kind=MutationKind.TRASHED, doc_id=doc_id))
        return await self.set_status(doc_id, DocumentStatus.TRASH)

    async def delete(self, doc_id: int) -> None:
        """Remove a document. Deleting an unknown id is a no-op."""
        if self._documents.pop(doc_id, None) is None:
            return
        await self.bus.publish(DocumentMutated(kind=MutationKind.DELETED, doc_id=doc_id))

    async def clean_cache(self, doc_id: int) -> None:
        await self.bus.publish(DocumentMutated(kind=MutationKind.CACHE_CLEARED, doc_id=doc_id))
