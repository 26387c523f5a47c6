"""Pure document endpoints - validate, publish gate and compile a posted document."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import Field

from backend.app.api.deps import parse_document_body
from backend.app.compiler.context import CompileContext
from backend.app.compiler.flex import NotCompilableError, compile_document
from backend.app.config import Settings, get_settings
from backend.app.models.common import CamelModel
from backend.app.models.validation import PublishGateResult, ValidationReport
from backend.app.validation.validator import is_publishable, validate_document

router = APIRouter(prefix="/flex", tags=["flex"])


class CompileRequest(CamelModel):
    """Request body for POST /flex/compile."""

    document: dict[str, Any]
    doc_id: str | None = None
    share_token: str | None = None
    alt_text: str | None = Field(None, description="Overrides the document title as alt text")


@router.post("/validate", response_model=ValidationReport)
async def validate(payload: Annotated[dict[str, Any], Body()]) -> ValidationReport:
    """Validate a document and compute its status."""
    return validate_document(parse_document_body(payload))


@router.post("/publishable", response_model=PublishGateResult)
async def publishable(payload: Annotated[dict[str, Any], Body()]) -> PublishGateResult:
    """Run the stricter publish-time gate."""
    return is_publishable(parse_document_body(payload))


@router.post("/compile")
async def compile_flex(
    request: CompileRequest,
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    """Best-effort compile for previews; drafts with errors still compile.

    Raises:
        HTTPException: 400 if the document is a folder
    """
    doc = parse_document_body(request.document)
    ctx = CompileContext.from_settings(
        settings,
        doc_id=request.doc_id,
        share_token=request.share_token,
        alt_text=request.alt_text,
    )

    try:
        message = compile_document(doc, ctx)
    except NotCompilableError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return message.to_wire()
