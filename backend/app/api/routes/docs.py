"""Document endpoints - CRUD, publish, versions and active share."""

import asyncio
from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from backend.app.adapters.image_check import apply_image_check, check_image
from backend.app.api.auth import get_current_context
from backend.app.api.deps import Store, get_publish_service, get_store, parse_document_body
from backend.app.api.routes.images import get_probe_client
from backend.app.compiler.context import ShareLinkConfig
from backend.app.compiler.flex import NotCompilableError
from backend.app.compiler.share_links import build_share_url
from backend.app.config import Settings, get_settings
from backend.app.db.context import RequestContext
from backend.app.db.repositories import DocumentRecord
from backend.app.models.common import ImageCheckResult
from backend.app.models.document import FolderDoc
from backend.app.models.validation import ValidationReport
from backend.app.publishing.service import DocumentNotFoundError, NotPublishableError, PublishService
from backend.app.templates.seeds import seed_bubble, seed_carousel, seed_special_carousel
from backend.app.validation.validator import validate_document

router = APIRouter(prefix="/docs", tags=["docs"])


class CreateDocRequest(BaseModel):
    """Request body for POST /docs: explicit content or a starter template."""

    document: dict[str, Any] | None = None
    template: Literal["bubble", "carousel", "special"] = "bubble"
    title: str | None = Field(None, max_length=200)
    card_count: int = Field(3, ge=1, le=5, description="Cards for the carousel template")


class DocResponse(BaseModel):
    """A stored document with its freshly computed report."""

    doc_id: UUID
    title: str
    status: str
    content: dict[str, Any]
    report: ValidationReport
    created_at: datetime
    updated_at: datetime


class DocSummary(BaseModel):
    doc_id: UUID
    title: str
    status: str
    updated_at: datetime


class DocListResponse(BaseModel):
    """Response for GET /docs."""

    docs: list[DocSummary]


class PublishResponse(BaseModel):
    """Response for POST /docs/{doc_id}/publish."""

    doc_id: UUID
    version_no: int
    token: str
    share_url: str
    flex_json: dict[str, Any]


class VersionResponse(BaseModel):
    doc_id: UUID
    version_no: int
    flex_json: dict[str, Any]
    validation_report: dict[str, Any]
    created_at: datetime


class ShareResponse(BaseModel):
    """Active share of a document."""

    token: str
    version_no: int
    share_url: str


class ImageCheckRequest(BaseModel):
    url: str = Field(..., min_length=1)


def _doc_response(record: DocumentRecord) -> DocResponse:
    return DocResponse(
        doc_id=record.doc_id,
        title=record.title,
        status=record.status,
        content=record.content,
        report=validate_document(record.document()),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _not_found(doc_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Document {doc_id} not found",
    )


def _get_owned(store: Store, doc_id: UUID, ctx: RequestContext) -> DocumentRecord:
    record = store.documents.get(doc_id, ctx)
    if record is None:
        raise _not_found(doc_id)
    return record


@router.post("", response_model=DocResponse, status_code=status.HTTP_201_CREATED)
def create_doc(
    request: CreateDocRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[Store, Depends(get_store)],
) -> DocResponse:
    """Create a document from posted content or a starter template."""
    if request.document is not None:
        doc = parse_document_body(request.document)
    elif request.template == "carousel":
        doc = seed_carousel(request.card_count)
    elif request.template == "special":
        doc = seed_special_carousel()
    else:
        doc = seed_bubble()

    if request.title is not None and not isinstance(doc, FolderDoc):
        doc = doc.model_copy(update={"title": request.title})

    return _doc_response(store.documents.create(doc, ctx))


@router.get("", response_model=DocListResponse)
def list_docs(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[Store, Depends(get_store)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> DocListResponse:
    """List the caller's documents, most recently updated first."""
    records = store.documents.list(ctx, limit=limit)
    return DocListResponse(
        docs=[
            DocSummary(doc_id=r.doc_id, title=r.title, status=r.status, updated_at=r.updated_at)
            for r in records
        ]
    )


@router.get("/{doc_id}", response_model=DocResponse)
def get_doc(
    doc_id: UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[Store, Depends(get_store)],
) -> DocResponse:
    """Get one document."""
    return _doc_response(_get_owned(store, doc_id, ctx))


@router.put("/{doc_id}", response_model=DocResponse)
def save_doc(
    doc_id: UUID,
    payload: Annotated[dict[str, Any], Body()],
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[Store, Depends(get_store)],
) -> DocResponse:
    """Replace document content; status is recomputed on save."""
    doc = parse_document_body(payload)
    record = store.documents.save(doc_id, doc, ctx)
    if record is None:
        raise _not_found(doc_id)
    return _doc_response(record)


@router.delete("/{doc_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_doc(
    doc_id: UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[Store, Depends(get_store)],
) -> Response:
    """Delete a document with its versions and shares."""
    if not store.documents.delete(doc_id, ctx):
        raise _not_found(doc_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{doc_id}/publish", response_model=PublishResponse)
def publish_doc(
    doc_id: UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[PublishService, Depends(get_publish_service)],
) -> PublishResponse:
    """Publish the current content as a new version with a fresh share token.

    Raises:
        HTTPException: 404 if not found, 409 if the publish gate fails,
            400 for folders
    """
    try:
        result = service.publish(doc_id, ctx)
    except DocumentNotFoundError as e:
        raise _not_found(doc_id) from e
    except NotPublishableError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "Document is not publishable",
                "errors": [issue.model_dump(mode="json") for issue in e.errors],
            },
        ) from e
    except NotCompilableError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return PublishResponse(
        doc_id=result.doc_id,
        version_no=result.version_no,
        token=result.token,
        share_url=result.share_url,
        flex_json=result.flex_json,
    )


@router.get("/{doc_id}/versions/{version_no}", response_model=VersionResponse)
def get_version(
    doc_id: UUID,
    version_no: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[Store, Depends(get_store)],
) -> VersionResponse:
    """Get a published version by number."""
    _get_owned(store, doc_id, ctx)
    version = store.versions.get_version(doc_id, version_no)
    if version is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Version {version_no} of document {doc_id} not found",
        )

    return VersionResponse(
        doc_id=version.doc_id,
        version_no=version.version_no,
        flex_json=version.flex_json,
        validation_report=version.validation_report,
        created_at=version.created_at,
    )


@router.get("/{doc_id}/share", response_model=ShareResponse)
def get_active_share(
    doc_id: UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[Store, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ShareResponse:
    """Active share token of a published document."""
    _get_owned(store, doc_id, ctx)
    share = store.shares.get_active_share(doc_id)
    if share is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document {doc_id} has not been published",
        )

    links = ShareLinkConfig(
        liff_id=settings.liff_id,
        link_style=settings.share_link_style,
        app_base_url=settings.app_base_url,
    )
    return ShareResponse(
        token=share.token,
        version_no=share.version_no,
        share_url=build_share_url(links, token=share.token, doc_id=str(doc_id)),
    )


@router.post("/{doc_id}/image-checks", response_model=DocResponse)
async def check_doc_image(
    doc_id: UUID,
    request: ImageCheckRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[Store, Depends(get_store)],
    client: Annotated[httpx.AsyncClient, Depends(get_probe_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DocResponse:
    """Probe one image URL and store the result on every external image using it.

    The result is applied to the content current at write time, so edits saved
    while the probe was in flight are kept. Store calls run off the event loop.
    """
    await asyncio.to_thread(_get_owned, store, doc_id, ctx)
    result: ImageCheckResult = await check_image(
        request.url,
        client=client,
        timeout_s=settings.image_check_timeout_s,
        warn_bytes=settings.image_warn_bytes,
    )

    updated = await asyncio.to_thread(
        store.documents.update,
        doc_id,
        lambda doc: apply_image_check(doc, request.url, result),
        ctx,
    )
    if updated is None:
        raise _not_found(doc_id)
    return _doc_response(updated)
