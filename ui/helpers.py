"""Helper functions for UI - API client calls and report formatting."""

from typing import Any

import httpx

STATUS_BADGES = {
    "draft": "🔴 Draft",
    "previewable": "🟡 Previewable",
    "publishable": "🟢 Publishable",
}


def get_auth_header(user_id: str = "dev-user") -> dict[str, str]:
    """Get auth header for API calls (bearer token is the user id)."""
    return {"Authorization": f"Bearer {user_id}"}


def _post(backend_url: str, path: str, payload: dict[str, Any], timeout: float = 15.0) -> dict[str, Any]:
    response = httpx.post(
        f"{backend_url}{path}",
        json=payload,
        headers=get_auth_header(),
        timeout=timeout,
    )
    response.raise_for_status()
    result: dict[str, Any] = response.json()
    return result


def call_validate(backend_url: str, document: dict[str, Any]) -> dict[str, Any]:
    """Call /flex/validate.

    Returns:
        ValidationReport dict

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    return _post(backend_url, "/flex/validate", document)


def call_compile(
    backend_url: str,
    document: dict[str, Any],
    doc_id: str | None = None,
    alt_text: str | None = None,
) -> dict[str, Any]:
    """Call /flex/compile for a preview.

    Returns:
        Flex Message dict

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    payload: dict[str, Any] = {"document": document}
    if doc_id:
        payload["docId"] = doc_id
    if alt_text:
        payload["altText"] = alt_text
    return _post(backend_url, "/flex/compile", payload)


def list_docs(backend_url: str) -> list[dict[str, Any]]:
    """Call GET /docs."""
    response = httpx.get(f"{backend_url}/docs", headers=get_auth_header(), timeout=15.0)
    response.raise_for_status()
    docs: list[dict[str, Any]] = response.json()["docs"]
    return docs


def create_doc(backend_url: str, template: str, card_count: int = 3) -> dict[str, Any]:
    """Create a document from a starter template."""
    return _post(backend_url, "/docs", {"template": template, "card_count": card_count})


def publish_doc(backend_url: str, doc_id: str) -> dict[str, Any]:
    """Publish a document; a 409 carries the blocking errors.

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    return _post(backend_url, f"/docs/{doc_id}/publish", {})


def format_issue(issue: dict[str, Any]) -> str:
    """One-line markdown rendering of a validation issue."""
    code = issue.get("code", "UNKNOWN")
    path = issue.get("path", "")
    message = issue.get("message", "")
    return f"`{code}` at `{path}`: {message}" if path else f"`{code}`: {message}"


def status_badge(status: str) -> str:
    return STATUS_BADGES.get(status, f"⚪ {status}")


def blocking_reason(report: dict[str, Any]) -> str | None:
    """Explain which gate blocks publishing, or None when publishable."""
    status = report.get("status")
    if status == "draft":
        return "Fix the structural errors below before publishing."
    if status == "previewable":
        return "An external image has not been confirmed reachable; re-check it before publishing."
    return None
