"""In-memory implementations of repository interfaces."""

import threading
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from backend.app.db.context import RequestContext
from backend.app.db.repositories import DocumentRecord, ShareRecord, VersionRecord, describe
from backend.app.models.document import BubbleDoc, CarouselDoc, FolderDoc


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDocumentRepository:
    """In-memory implementation of DocumentRepository."""

    def __init__(
        self,
        versions: "InMemoryVersionRepository | None" = None,
        shares: "InMemoryShareRepository | None" = None,
    ) -> None:
        self._docs: dict[uuid.UUID, DocumentRecord] = {}
        self._lock = threading.Lock()
        # Cascade targets on delete
        self._versions = versions
        self._shares = shares

    def create(self, doc: BubbleDoc | CarouselDoc | FolderDoc, ctx: RequestContext) -> DocumentRecord:
        """Create a document owned by the caller."""
        title, content, status = describe(doc)
        now = _now()
        record = DocumentRecord(
            doc_id=uuid.uuid4(),
            owner_id=ctx.user_id,
            title=title,
            content=content,
            status=status,
            created_at=now,
            updated_at=now,
        )

        with self._lock:
            self._docs[record.doc_id] = record
        return record

    def get(self, doc_id: uuid.UUID, ctx: RequestContext) -> DocumentRecord | None:
        """Get document by ID."""
        record = self._docs.get(doc_id)

        # Enforce ownership
        if record is None or record.owner_id != ctx.user_id:
            return None

        return record

    def list(self, ctx: RequestContext, limit: int = 50) -> list[DocumentRecord]:
        """List the caller's documents."""
        results = [r for r in self._docs.values() if r.owner_id == ctx.user_id]
        results.sort(key=lambda r: r.updated_at, reverse=True)
        return results[:limit]

    def save(
        self, doc_id: uuid.UUID, doc: BubbleDoc | CarouselDoc | FolderDoc, ctx: RequestContext
    ) -> DocumentRecord | None:
        """Replace document content and recompute status."""
        title, content, status = describe(doc)

        with self._lock:
            record = self.get(doc_id, ctx)
            if record is None:
                return None

            updated = replace(record, title=title, content=content, status=status, updated_at=_now())
            self._docs[doc_id] = updated
            return updated

    def update(
        self,
        doc_id: uuid.UUID,
        mutate: Callable[[BubbleDoc | CarouselDoc | FolderDoc], BubbleDoc | CarouselDoc | FolderDoc],
        ctx: RequestContext,
    ) -> DocumentRecord | None:
        """Read, mutate and write back under the store lock."""
        with self._lock:
            record = self.get(doc_id, ctx)
            if record is None:
                return None

            title, content, status = describe(mutate(record.document()))
            updated = replace(record, title=title, content=content, status=status, updated_at=_now())
            self._docs[doc_id] = updated
            return updated

    def delete(self, doc_id: uuid.UUID, ctx: RequestContext) -> bool:
        """Delete a document."""
        with self._lock:
            if self.get(doc_id, ctx) is None:
                return False
            del self._docs[doc_id]

        if self._versions is not None:
            self._versions.drop_document(doc_id)
        if self._shares is not None:
            self._shares.drop_document(doc_id)
        return True


class InMemoryVersionRepository:
    """In-memory implementation of VersionRepository."""

    def __init__(self, shares: "InMemoryShareRepository") -> None:
        self._versions: dict[uuid.UUID, list[VersionRecord]] = {}
        self._lock = threading.Lock()
        self._shares = shares

    def append_version(
        self, doc_id: uuid.UUID, flex_json: dict[str, Any], validation_report: dict[str, Any]
    ) -> VersionRecord:
        """Append the next version of a document."""
        with self._lock:
            return self._append(doc_id, flex_json, validation_report)

    def append_published(
        self, doc_id: uuid.UUID, flex_json: dict[str, Any], validation_report: dict[str, Any], token: str
    ) -> tuple[VersionRecord, ShareRecord]:
        """Append a version and activate its token while holding the version lock."""
        with self._lock:
            version = self._append(doc_id, flex_json, validation_report)
            share = self._shares.activate_token(doc_id, version.version_no, token)
        return version, share

    def _append(
        self, doc_id: uuid.UUID, flex_json: dict[str, Any], validation_report: dict[str, Any]
    ) -> VersionRecord:
        versions = self._versions.setdefault(doc_id, [])
        record = VersionRecord(
            doc_id=doc_id,
            version_no=len(versions) + 1,
            flex_json=flex_json,
            validation_report=validation_report,
            created_at=_now(),
        )
        versions.append(record)
        return record

    def get_version(self, doc_id: uuid.UUID, version_no: int) -> VersionRecord | None:
        """Get a version by number."""
        versions = self._versions.get(doc_id, [])
        if 1 <= version_no <= len(versions):
            return versions[version_no - 1]
        return None

    def latest_version(self, doc_id: uuid.UUID) -> VersionRecord | None:
        """Get the highest-numbered version."""
        versions = self._versions.get(doc_id)
        return versions[-1] if versions else None

    def drop_document(self, doc_id: uuid.UUID) -> None:
        with self._lock:
            self._versions.pop(doc_id, None)


class InMemoryShareRepository:
    """In-memory implementation of ShareRepository."""

    def __init__(self) -> None:
        self._shares: dict[str, ShareRecord] = {}
        self._lock = threading.Lock()

    def activate_token(self, doc_id: uuid.UUID, version_no: int, token: str) -> ShareRecord:
        """Swap the active token under one lock."""
        record = ShareRecord(
            token=token,
            doc_id=doc_id,
            version_no=version_no,
            is_active=True,
            created_at=_now(),
        )

        with self._lock:
            for existing in self._shares.values():
                if existing.doc_id == doc_id and existing.is_active:
                    existing.is_active = False
            self._shares[token] = record

        return record

    def get_share(self, token: str) -> ShareRecord | None:
        """Look up a token."""
        return self._shares.get(token)

    def get_active_share(self, doc_id: uuid.UUID) -> ShareRecord | None:
        """The active token of a document."""
        with self._lock:
            for record in self._shares.values():
                if record.doc_id == doc_id and record.is_active:
                    return record
        return None

    def drop_document(self, doc_id: uuid.UUID) -> None:
        with self._lock:
            self._shares = {t: r for t, r in self._shares.items() if r.doc_id != doc_id}
