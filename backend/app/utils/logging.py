"""Structured logging for publishing, image checks and autosave."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at process start."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


class StructuredEventLogger:
    """Structured logger for editor workflow events."""

    def _emit(self, msg: str, ok: bool, log_data: dict[str, Any]) -> None:
        if ok:
            logger.info(msg, extra={"structured": log_data})
        else:
            logger.warning(msg, extra={"structured": log_data})

    def log_publish(
        self,
        doc_id: str,
        outcome: str,
        version_no: int | None = None,
        error_codes: list[str] | None = None,
    ) -> None:
        """Log a publish attempt with structured data."""
        log_data: dict[str, Any] = {"doc_id": doc_id, "outcome": outcome}

        if version_no is not None:
            log_data["version_no"] = version_no
        if error_codes:
            log_data["error_codes"] = error_codes

        self._emit(f"Publish: {doc_id} - {outcome}", outcome == "published", log_data)

    def log_image_check(
        self,
        url: str,
        level: str,
        reason_code: str | None,
        latency_ms: float,
    ) -> None:
        """Log an image reachability probe."""
        log_data: dict[str, Any] = {
            "url": url,
            "level": level,
            "latency_ms": round(latency_ms, 2),
        }

        if reason_code:
            log_data["reason_code"] = reason_code

        self._emit(f"Image check: {level}", level != "fail", log_data)

    def log_autosave(self, doc_id: str, outcome: str, error_reason: str | None = None) -> None:
        """Log one autosave attempt."""
        log_data: dict[str, Any] = {"doc_id": doc_id, "outcome": outcome}

        if error_reason:
            log_data["error_reason"] = error_reason

        self._emit(f"Autosave: {doc_id} - {outcome}", outcome == "saved", log_data)
