"""Repository protocol interfaces for data access."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from backend.app.db.context import RequestContext
from backend.app.models.document import BubbleDoc, CarouselDoc, FolderDoc, document_title, parse_document
from backend.app.validation.validator import validate_document


@dataclass
class DocumentRecord:
    """Stored editor document."""

    doc_id: UUID
    owner_id: str
    title: str
    content: dict[str, Any]
    status: str
    created_at: datetime
    updated_at: datetime

    def document(self) -> BubbleDoc | CarouselDoc | FolderDoc:
        """Typed view of the stored content."""
        return parse_document(self.content)


@dataclass
class VersionRecord:
    """Immutable compiled snapshot of a document."""

    doc_id: UUID
    version_no: int
    flex_json: dict[str, Any]
    validation_report: dict[str, Any]
    created_at: datetime


@dataclass
class ShareRecord:
    """Share token pointing at one published version."""

    token: str
    doc_id: UUID
    version_no: int
    is_active: bool
    created_at: datetime


def describe(doc: BubbleDoc | CarouselDoc | FolderDoc) -> tuple[str, dict[str, Any], str]:
    """Title, JSON content and freshly computed status for persisting a document."""
    report = validate_document(doc)
    return document_title(doc), doc.to_json_dict(), report.status.value


class DocumentRepository(Protocol):
    """Repository for editor documents."""

    def create(self, doc: BubbleDoc | CarouselDoc | FolderDoc, ctx: RequestContext) -> DocumentRecord:
        """Create a document owned by the caller.

        Args:
            doc: Document content
            ctx: Request context with user ID

        Returns:
            Stored record, status computed from the content
        """
        ...

    def get(self, doc_id: UUID, ctx: RequestContext) -> DocumentRecord | None:
        """Get document by ID.

        Args:
            doc_id: Document ID
            ctx: Request context (enforces ownership)

        Returns:
            Document record or None if not found
        """
        ...

    def list(self, ctx: RequestContext, limit: int = 50) -> list[DocumentRecord]:
        """List the caller's documents, most recently updated first."""
        ...

    def save(
        self, doc_id: UUID, doc: BubbleDoc | CarouselDoc | FolderDoc, ctx: RequestContext
    ) -> DocumentRecord | None:
        """Replace document content and store its recomputed status.

        Returns:
            Updated record or None if not found
        """
        ...

    def update(
        self,
        doc_id: UUID,
        mutate: Callable[[BubbleDoc | CarouselDoc | FolderDoc], BubbleDoc | CarouselDoc | FolderDoc],
        ctx: RequestContext,
    ) -> DocumentRecord | None:
        """Apply ``mutate`` to the current content and store the result atomically.

        No save of the same document can land between the read and the write.

        Returns:
            Updated record or None if not found
        """
        ...

    def delete(self, doc_id: UUID, ctx: RequestContext) -> bool:
        """Delete a document with its versions and shares.

        Returns:
            True if a document was deleted
        """
        ...


class VersionRepository(Protocol):
    """Repository for append-only published versions."""

    def append_version(
        self, doc_id: UUID, flex_json: dict[str, Any], validation_report: dict[str, Any]
    ) -> VersionRecord:
        """Append the next version of a document.

        Args:
            doc_id: Document ID
            flex_json: Compiled wire message
            validation_report: Report captured at publish time

        Returns:
            New version record, numbered one past the latest
        """
        ...

    def append_published(
        self, doc_id: UUID, flex_json: dict[str, Any], validation_report: dict[str, Any], token: str
    ) -> tuple[VersionRecord, ShareRecord]:
        """Append the next version and make ``token`` its only active share.

        Both writes commit together or not at all, so the active token always
        points at the newest version even when publishes race.

        Returns:
            The new version and its active share
        """
        ...

    def get_version(self, doc_id: UUID, version_no: int) -> VersionRecord | None:
        """Get a version by number."""
        ...

    def latest_version(self, doc_id: UUID) -> VersionRecord | None:
        """Get the highest-numbered version."""
        ...


class ShareRepository(Protocol):
    """Repository for share tokens."""

    def activate_token(self, doc_id: UUID, version_no: int, token: str) -> ShareRecord:
        """Deactivate every token of the document and insert ``token`` as active.

        Both steps happen atomically with respect to concurrent activations of
        the same document.
        """
        ...

    def get_share(self, token: str) -> ShareRecord | None:
        """Look up a token regardless of owner."""
        ...

    def get_active_share(self, doc_id: UUID) -> ShareRecord | None:
        """The single active token of a document, if published."""
        ...
