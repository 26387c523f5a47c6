"""Deep links that re-enter the share flow for a published document."""

from urllib.parse import quote, urlencode

from backend.app.compiler.context import ShareLinkConfig

PREVIEW_TARGET_ID = "PREVIEW_MODE"
PLACEHOLDER_LIFF_ID = "YOUR_LIFF_ID"


def share_state(*, token: str | None, doc_id: str | None) -> str:
    """In-app route of the share page.

    A minted token is preferred since it stays stable across re-previews;
    without one the document id (or a preview placeholder) is carried.
    """
    params = {"token": token} if token else {"id": doc_id or PREVIEW_TARGET_ID}
    params["autoshare"] = "1"
    return f"/share?{urlencode(params)}"


def build_share_url(config: ShareLinkConfig, *, token: str | None, doc_id: str | None) -> str:
    """Absolute link for a ``share`` action.

    Args:
        config: Share link configuration
        token: Active share token, if one has been minted
        doc_id: Document id fallback for preview mode

    Returns:
        LIFF URL (web or line:// scheme), or an app URL when no LIFF id is configured
    """
    state = share_state(token=token, doc_id=doc_id)

    if not config.liff_id and config.app_base_url:
        return f"{config.app_base_url.rstrip('/')}{state}"

    liff_id = config.liff_id or PLACEHOLDER_LIFF_ID
    encoded_state = quote(state, safe="")
    if config.link_style == "line_scheme":
        return f"line://app/{liff_id}?liff.state={encoded_state}"
    return f"https://liff.line.me/{liff_id}?liff.state={encoded_state}"
