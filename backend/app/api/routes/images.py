"""Image reachability endpoint."""

from collections.abc import AsyncGenerator
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from backend.app.adapters.image_check import check_image
from backend.app.config import Settings, get_settings

router = APIRouter(tags=["images"])


async def get_probe_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client used by the probe (overridden in tests)."""
    async with httpx.AsyncClient(timeout=settings.image_check_timeout_s, follow_redirects=True) as client:
        yield client


@router.get("/check-image", response_model=None)
async def check_image_route(
    url: Annotated[str, Query(min_length=1)],
    client: Annotated[httpx.AsyncClient, Depends(get_probe_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any] | JSONResponse:
    """Probe an image URL.

    Returns:
        Check result; 400 when the URL is not HTTPS
    """
    result = await check_image(
        url,
        client=client,
        timeout_s=settings.image_check_timeout_s,
        warn_bytes=settings.image_warn_bytes,
    )
    body = result.to_json_dict()

    if result.reason_code == "NOT_HTTPS":
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)
    return body
