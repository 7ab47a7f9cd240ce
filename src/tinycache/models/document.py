from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class DocumentStatus(StrEnum):
    PUBLISH = "publish"
    FUTURE = "future"
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    TRASH = "trash"
    AUTO_DRAFT = "auto-draft"
    INHERIT = "inherit"


class Document(BaseModel):
    """A document as seen by the cache: identity, lifecycle status and body."""

    id: int
    status: DocumentStatus = DocumentStatus.DRAFT
    password: str = ""
    title: str = ""
    body: str = ""

    @property
    def password_protected(self) -> bool:
        return bool(self.password)
