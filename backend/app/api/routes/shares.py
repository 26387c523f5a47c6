"""Public share resolution - GET /share (no auth)."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from backend.app.api.deps import Store, get_store
from backend.app.db.repositories import ShareRecord
from backend.app.sharing.liff import ShareRejectedError, build_share_messages, parse_share_params

router = APIRouter(tags=["share"])


class PublicShareResponse(BaseModel):
    """Published message ready for the share target picker."""

    token: str
    doc_id: UUID
    version_no: int
    autoshare: bool
    flex_json: dict[str, Any]
    messages: list[dict[str, Any]]


def _resolve_share(store: Store, token: str | None, doc_id: str | None) -> ShareRecord | None:
    if token:
        share = store.shares.get_share(token)
        return share if share is not None and share.is_active else None
    if doc_id:
        try:
            return store.shares.get_active_share(UUID(doc_id))
        except ValueError:
            return None
    return None


@router.get("/share", response_model=PublicShareResponse)
def resolve_share(
    request: Request,
    store: Annotated[Store, Depends(get_store)],
) -> PublicShareResponse:
    """Resolve ``token`` (or ``id`` to its active token) to the published version.

    Parameters may arrive nested in ``liff.state``.

    Raises:
        HTTPException: 400 without token or id, 404 for unknown or retired
            shares, 422 if the stored message fails the pre-share check
    """
    params = parse_share_params(str(request.query_params))
    if not params.token and not params.doc_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing token or id",
        )

    share = _resolve_share(store, params.token, params.doc_id)
    if share is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Share not found or not published",
        )

    version = store.versions.get_version(share.doc_id, share.version_no)
    if version is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Published version not found",
        )

    try:
        messages = build_share_messages(version.flex_json)
    except ShareRejectedError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    return PublicShareResponse(
        token=share.token,
        doc_id=share.doc_id,
        version_no=share.version_no,
        autoshare=params.autoshare,
        flex_json=version.flex_json,
        messages=messages,
    )
