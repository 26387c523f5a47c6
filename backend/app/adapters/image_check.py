"""Image reachability probe for externally linked images."""

import re
import time
from datetime import datetime, timezone

import httpx

from backend.app.models.common import CheckLevel, ExternalImage, ImageCheckResult
from backend.app.models.document import BubbleDoc, CarouselDoc, FolderDoc
from backend.app.utils.logging import StructuredEventLogger
from backend.app.utils.metrics import PrometheusFlexMetrics

DEFAULT_TIMEOUT_S = 8.0
DEFAULT_WARN_BYTES = 5 * 1024 * 1024

_IMAGE_CONTENT_TYPE = re.compile(r"^image/(jpeg|png|webp)", re.IGNORECASE)

_events = StructuredEventLogger()
_metrics = PrometheusFlexMetrics()


def _content_length(response: httpx.Response) -> int | None:
    try:
        return int(response.headers.get("content-length", "")) or None
    except ValueError:
        return None


def classify_response(response: httpx.Response, warn_bytes: int = DEFAULT_WARN_BYTES) -> ImageCheckResult:
    """Classify a probe response by status, content type and size."""
    content_type = response.headers.get("content-type", "")
    content_length = _content_length(response)
    diagnostics = {
        "status": response.status_code,
        "content_type": content_type,
        "content_length": content_length,
    }

    if not response.is_success:
        return ImageCheckResult(ok=False, level=CheckLevel.FAIL, reason_code="FETCH_FAIL", **diagnostics)
    if not _IMAGE_CONTENT_TYPE.match(content_type):
        return ImageCheckResult(ok=False, level=CheckLevel.FAIL, reason_code="CONTENT_TYPE_INVALID", **diagnostics)
    if content_length and content_length > warn_bytes:
        return ImageCheckResult(ok=True, level=CheckLevel.WARN, reason_code="TOO_LARGE", **diagnostics)
    return ImageCheckResult(ok=True, level=CheckLevel.PASS, **diagnostics)


async def check_image(
    url: str,
    client: httpx.AsyncClient | None = None,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    warn_bytes: int = DEFAULT_WARN_BYTES,
) -> ImageCheckResult:
    """Probe an image URL for publish readiness.

    Tries HEAD first and falls back to a small ranged GET for hosts that
    reject HEAD. Network failures never raise.

    Args:
        url: Image URL to probe
        client: Optional httpx client (for testing with mocks)
        timeout_s: Overall request timeout
        warn_bytes: Size above which the image passes with a warning

    Returns:
        Check result stamped with ``checked_at``
    """
    started = time.perf_counter()

    if not url.startswith("https://"):
        result = ImageCheckResult(ok=False, level=CheckLevel.FAIL, reason_code="NOT_HTTPS")
        return _finish(url, result, started)

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=timeout_s, follow_redirects=True)
        close_client = True

    try:
        response = await client.head(url)
        if not response.is_success:
            response = await client.get(url, headers={"Range": "bytes=0-1024"})
        result = classify_response(response, warn_bytes)
    except httpx.HTTPError:
        result = ImageCheckResult(ok=False, level=CheckLevel.FAIL, reason_code="TIMEOUT_OR_NETWORK")
    finally:
        if close_client:
            await client.aclose()

    return _finish(url, result, started)


def _finish(url: str, result: ImageCheckResult, started: float) -> ImageCheckResult:
    latency_ms = (time.perf_counter() - started) * 1000
    result = result.model_copy(update={"checked_at": datetime.now(timezone.utc)})
    _events.log_image_check(url, result.level.value, result.reason_code, latency_ms)
    _metrics.record_image_check(result.level.value, latency_ms)
    return result


def _apply_to_image(image: ExternalImage, url: str, result: ImageCheckResult) -> ExternalImage:
    if image.url != url:
        return image
    return image.model_copy(update={"last_check": result})


def apply_image_check(
    doc: BubbleDoc | CarouselDoc | FolderDoc, url: str, result: ImageCheckResult
) -> BubbleDoc | CarouselDoc | FolderDoc:
    """Copy of ``doc`` with ``last_check`` set on every external image at ``url``."""
    if isinstance(doc, FolderDoc):
        return doc

    updated = doc.model_copy(deep=True)
    sections = [updated.section] if isinstance(updated, BubbleDoc) else [c.section for c in updated.cards]

    for section in sections:
        if section.kind == "special":
            if isinstance(section.image, ExternalImage):
                section.image = _apply_to_image(section.image, url, result)
            continue
        for hero in section.hero:
            if hero.kind == "hero_image" and isinstance(hero.image, ExternalImage):
                hero.image = _apply_to_image(hero.image, url, result)

    return updated
