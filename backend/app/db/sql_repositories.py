"""SQL implementations of repository interfaces."""

import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from backend.app.db.context import RequestContext
from backend.app.db.models import DocVersion, FlexDoc, Share
from backend.app.db.queries import query_documents
from backend.app.db.repositories import DocumentRecord, ShareRecord, VersionRecord, describe
from backend.app.models.document import BubbleDoc, CarouselDoc, FolderDoc


def _document_record(doc: FlexDoc) -> DocumentRecord:
    return DocumentRecord(
        doc_id=doc.doc_id,
        owner_id=doc.owner_id,
        title=doc.title,
        content=doc.content,
        status=doc.status,
        created_at=doc.created_at,
        updated_at=doc.updated_at,
    )


def _version_record(version: DocVersion) -> VersionRecord:
    return VersionRecord(
        doc_id=version.doc_id,
        version_no=version.version_no,
        flex_json=version.flex_json,
        validation_report=version.validation_report,
        created_at=version.created_at,
    )


def _share_record(share: Share) -> ShareRecord:
    return ShareRecord(
        token=share.token,
        doc_id=share.doc_id,
        version_no=share.version_no,
        is_active=share.is_active,
        created_at=share.created_at,
    )


def _lock_document(session: Session, doc_id: uuid.UUID) -> FlexDoc | None:
    # Row lock serializes publishes of one document until commit (no-op on sqlite)
    return session.query(FlexDoc).filter(FlexDoc.doc_id == doc_id).with_for_update().first()


def _add_next_version(
    session: Session, doc_id: uuid.UUID, flex_json: dict[str, Any], validation_report: dict[str, Any]
) -> DocVersion:
    latest = (
        session.query(func.max(DocVersion.version_no))
        .filter(DocVersion.doc_id == doc_id)
        .scalar()
    )
    version = DocVersion(
        doc_id=doc_id,
        version_no=(latest or 0) + 1,
        flex_json=flex_json,
        validation_report=validation_report,
    )
    session.add(version)
    session.flush()
    return version


def _swap_active_share(session: Session, doc_id: uuid.UUID, version_no: int, token: str) -> Share:
    session.execute(
        update(Share)
        .where(Share.doc_id == doc_id, Share.is_active.is_(True))
        .values(is_active=False)
    )
    # Flush the deactivation before the insert so the partial index holds
    session.flush()
    share = Share(token=token, doc_id=doc_id, version_no=version_no, is_active=True)
    session.add(share)
    session.flush()
    return share


class SqlDocumentRepository:
    """SQL implementation of DocumentRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, doc: BubbleDoc | CarouselDoc | FolderDoc, ctx: RequestContext) -> DocumentRecord:
        """Create a document owned by the caller."""
        title, content, status = describe(doc)

        row = FlexDoc(
            doc_id=uuid.uuid4(),
            owner_id=ctx.user_id,
            title=title,
            content=content,
            status=status,
        )

        self._session.add(row)
        self._session.commit()

        return _document_record(row)

    def get(self, doc_id: uuid.UUID, ctx: RequestContext) -> DocumentRecord | None:
        """Get document by ID."""
        row = query_documents(self._session, ctx).filter(FlexDoc.doc_id == doc_id).first()

        if row is None:
            return None

        return _document_record(row)

    def list(self, ctx: RequestContext, limit: int = 50) -> list[DocumentRecord]:
        """List the caller's documents."""
        rows = (
            query_documents(self._session, ctx)
            .order_by(FlexDoc.updated_at.desc())
            .limit(limit)
            .all()
        )
        return [_document_record(row) for row in rows]

    def save(
        self, doc_id: uuid.UUID, doc: BubbleDoc | CarouselDoc | FolderDoc, ctx: RequestContext
    ) -> DocumentRecord | None:
        """Replace document content and recompute status."""
        row = query_documents(self._session, ctx).filter(FlexDoc.doc_id == doc_id).first()

        if row is None:
            return None

        row.title, row.content, row.status = describe(doc)
        self._session.commit()

        return _document_record(row)

    def update(
        self,
        doc_id: uuid.UUID,
        mutate: Callable[[BubbleDoc | CarouselDoc | FolderDoc], BubbleDoc | CarouselDoc | FolderDoc],
        ctx: RequestContext,
    ) -> DocumentRecord | None:
        """Read, mutate and write back while holding the document row lock."""
        try:
            row = (
                query_documents(self._session, ctx)
                .filter(FlexDoc.doc_id == doc_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if row is None:
                self._session.rollback()
                return None

            current = _document_record(row).document()
            row.title, row.content, row.status = describe(mutate(current))
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        return _document_record(row)

    def delete(self, doc_id: uuid.UUID, ctx: RequestContext) -> bool:
        """Delete a document; versions and shares cascade."""
        row = query_documents(self._session, ctx).filter(FlexDoc.doc_id == doc_id).first()

        if row is None:
            return False

        self._session.delete(row)
        self._session.commit()
        return True


class SqlVersionRepository:
    """SQL implementation of VersionRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def append_version(
        self, doc_id: uuid.UUID, flex_json: dict[str, Any], validation_report: dict[str, Any]
    ) -> VersionRecord:
        """Append the next version of a document."""
        try:
            _lock_document(self._session, doc_id)
            version = _add_next_version(self._session, doc_id, flex_json, validation_report)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        return _version_record(version)

    def append_published(
        self, doc_id: uuid.UUID, flex_json: dict[str, Any], validation_report: dict[str, Any], token: str
    ) -> tuple[VersionRecord, ShareRecord]:
        """Append a version and activate its token under one row lock and one commit."""
        try:
            _lock_document(self._session, doc_id)
            version = _add_next_version(self._session, doc_id, flex_json, validation_report)
            share = _swap_active_share(self._session, doc_id, version.version_no, token)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        return _version_record(version), _share_record(share)

    def get_version(self, doc_id: uuid.UUID, version_no: int) -> VersionRecord | None:
        """Get a version by number."""
        version = (
            self._session.query(DocVersion)
            .filter(DocVersion.doc_id == doc_id, DocVersion.version_no == version_no)
            .first()
        )
        return _version_record(version) if version else None

    def latest_version(self, doc_id: uuid.UUID) -> VersionRecord | None:
        """Get the highest-numbered version."""
        version = (
            self._session.query(DocVersion)
            .filter(DocVersion.doc_id == doc_id)
            .order_by(DocVersion.version_no.desc())
            .first()
        )
        return _version_record(version) if version else None


class SqlShareRepository:
    """SQL implementation of ShareRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def activate_token(self, doc_id: uuid.UUID, version_no: int, token: str) -> ShareRecord:
        """Deactivate old tokens and insert the new active one in one transaction."""
        try:
            _lock_document(self._session, doc_id)
            share = _swap_active_share(self._session, doc_id, version_no, token)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        return _share_record(share)

    def get_share(self, token: str) -> ShareRecord | None:
        """Look up a token."""
        share = self._session.query(Share).filter(Share.token == token).first()
        return _share_record(share) if share else None

    def get_active_share(self, doc_id: uuid.UUID) -> ShareRecord | None:
        """The active token of a document."""
        share = (
            self._session.query(Share)
            .filter(Share.doc_id == doc_id, Share.is_active.is_(True))
            .first()
        )
        return _share_record(share) if share else None
