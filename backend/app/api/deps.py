"""Shared route dependencies: repositories, publish service, document parsing."""

from collections.abc import Generator
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from backend.app.compiler.context import CompileContext
from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_session_factory
from backend.app.db.inmemory import (
    InMemoryDocumentRepository,
    InMemoryShareRepository,
    InMemoryVersionRepository,
)
from backend.app.db.repositories import DocumentRepository, ShareRepository, VersionRepository
from backend.app.db.sql_repositories import (
    SqlDocumentRepository,
    SqlShareRepository,
    SqlVersionRepository,
)
from backend.app.models.document import BubbleDoc, CarouselDoc, FolderDoc, parse_document
from backend.app.publishing.service import PublishService


@dataclass
class Store:
    """Repositories used by one request."""

    documents: DocumentRepository
    versions: VersionRepository
    shares: ShareRepository


def create_memory_store() -> Store:
    """Fresh process-local store; deleting a document drops its versions and shares."""
    shares = InMemoryShareRepository()
    versions = InMemoryVersionRepository(shares)
    return Store(
        documents=InMemoryDocumentRepository(versions=versions, shares=shares),
        versions=versions,
        shares=shares,
    )


_memory_store: Store | None = None


def get_store(settings: Annotated[Settings, Depends(get_settings)]) -> Generator[Store, None, None]:
    """SQL-backed store when DATABASE_URL is set, else the in-memory one."""
    global _memory_store

    if not settings.database_url:
        if _memory_store is None:
            _memory_store = create_memory_store()
        yield _memory_store
        return

    with get_session_factory()() as session:
        yield Store(
            documents=SqlDocumentRepository(session),
            versions=SqlVersionRepository(session),
            shares=SqlShareRepository(session),
        )


def get_publish_service(
    store: Annotated[Store, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PublishService:
    return PublishService(
        store.documents,
        store.versions,
        base_context=CompileContext.from_settings(settings),
    )


def parse_document_body(payload: dict[str, Any]) -> BubbleDoc | CarouselDoc | FolderDoc:
    """Parse posted document JSON, reporting schema mismatches as 422.

    Raises:
        RequestValidationError: If the payload matches no document shape
    """
    try:
        return parse_document(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e
