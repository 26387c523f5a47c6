"""Publish workflow: gate, mint, compile, snapshot, activate."""

import secrets
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any
from uuid import UUID

from backend.app.compiler.context import CompileContext
from backend.app.compiler.flex import compile_document
from backend.app.compiler.share_links import build_share_url
from backend.app.db.context import RequestContext
from backend.app.db.repositories import DocumentRepository, VersionRepository
from backend.app.models.validation import ValidationIssue
from backend.app.utils.logging import StructuredEventLogger
from backend.app.utils.metrics import PrometheusFlexMetrics
from backend.app.validation.validator import is_publishable, validate_document

TOKEN_BYTES = 32


class DocumentNotFoundError(Exception):
    """No document with that id is visible to the caller."""

    pass


class NotPublishableError(Exception):
    """The publish gate refused the document."""

    def __init__(self, errors: list[ValidationIssue]) -> None:
        self.errors = errors
        codes = ", ".join(sorted({e.code for e in errors}))
        super().__init__(f"document is not publishable: {codes}")


@dataclass
class PublishResult:
    """Outcome of a successful publish."""

    doc_id: UUID
    version_no: int
    token: str
    share_url: str
    flex_json: dict[str, Any]


def mint_token() -> str:
    """Opaque, unguessable share token."""
    return secrets.token_hex(TOKEN_BYTES)


class PublishService:
    """Publishes documents as immutable versions with one active share token."""

    def __init__(
        self,
        documents: DocumentRepository,
        versions: VersionRepository,
        base_context: CompileContext | None = None,
        event_logger: StructuredEventLogger | None = None,
        metrics: PrometheusFlexMetrics | None = None,
    ) -> None:
        self._documents = documents
        self._versions = versions
        self._base_context = base_context or CompileContext()
        self._events = event_logger or StructuredEventLogger()
        self._metrics = metrics or PrometheusFlexMetrics()

    def publish(self, doc_id: UUID, ctx: RequestContext) -> PublishResult:
        """Publish the current content of a document.

        The gate is re-run here even if the caller holds a fresh report, since
        cached image checks may have changed since the last edit.

        Args:
            doc_id: Document ID
            ctx: Request context (enforces ownership)

        Returns:
            New version number, active token and compiled message

        Raises:
            DocumentNotFoundError: If the document does not exist for this caller
            NotPublishableError: If the publish gate reports errors
            NotCompilableError: If the document is a folder
        """
        with _publish_lock(doc_id):
            record = self._documents.get(doc_id, ctx)
            if record is None:
                self._record(str(doc_id), "not_found")
                raise DocumentNotFoundError(str(doc_id))

            doc = record.document()
            gate = is_publishable(doc)
            if not gate.ok:
                self._record(str(doc_id), "rejected", error_codes=[e.code for e in gate.errors])
                raise NotPublishableError(gate.errors)

            token = mint_token()
            compile_ctx = replace(self._base_context, doc_id=str(doc_id), share_token=token)
            flex_json = compile_document(doc, compile_ctx).to_wire()
            report = validate_document(doc)

            version, _ = self._versions.append_published(
                doc_id, flex_json, report.model_dump(mode="json"), token
            )

        self._record(str(doc_id), "published", version_no=version.version_no)
        return PublishResult(
            doc_id=doc_id,
            version_no=version.version_no,
            token=token,
            share_url=build_share_url(compile_ctx.share_links, token=token, doc_id=str(doc_id)),
            flex_json=flex_json,
        )

    def _record(
        self,
        doc_id: str,
        outcome: str,
        version_no: int | None = None,
        error_codes: list[str] | None = None,
    ) -> None:
        self._events.log_publish(doc_id, outcome, version_no=version_no, error_codes=error_codes)
        self._metrics.inc_publish(outcome)


# doc_id -> (lock, publishes holding or waiting on it); dropped when unused
_locks: dict[UUID, tuple[threading.Lock, int]] = {}
_locks_guard = threading.Lock()


@contextmanager
def _publish_lock(doc_id: UUID) -> Iterator[None]:
    # Publishes are non-reentrant per document within one process
    with _locks_guard:
        lock, users = _locks.get(doc_id, (threading.Lock(), 0))
        _locks[doc_id] = (lock, users + 1)

    try:
        with lock:
            yield
    finally:
        with _locks_guard:
            lock, users = _locks[doc_id]
            if users == 1:
                del _locks[doc_id]
            else:
                _locks[doc_id] = (lock, users - 1)
