"""Tests for share deep links."""

from urllib.parse import unquote

from backend.app.compiler.context import CompileContext, ShareLinkConfig
from backend.app.compiler.share_links import build_share_url, share_state
from backend.app.config import Settings


def test_state_prefers_token() -> None:
    assert share_state(token="abc", doc_id="d1") == "/share?token=abc&autoshare=1"


def test_state_falls_back_to_id_then_preview() -> None:
    assert share_state(token=None, doc_id="d1") == "/share?id=d1&autoshare=1"
    assert share_state(token=None, doc_id=None) == "/share?id=PREVIEW_MODE&autoshare=1"


def test_liff_web_url() -> None:
    url = build_share_url(ShareLinkConfig(liff_id="123-x"), token="abc", doc_id=None)

    assert url.startswith("https://liff.line.me/123-x?liff.state=")
    assert unquote(url.split("=", 1)[1]) == "/share?token=abc&autoshare=1"


def test_line_scheme_url() -> None:
    url = build_share_url(ShareLinkConfig(liff_id="123-x", link_style="line_scheme"), token="abc", doc_id=None)
    assert url.startswith("line://app/123-x?liff.state=")


def test_app_url_without_liff_id() -> None:
    """Test that an app base URL is used when no LIFF id is configured."""
    config = ShareLinkConfig(app_base_url="https://studio.example.com/")
    assert build_share_url(config, token="abc", doc_id=None) == "https://studio.example.com/share?token=abc&autoshare=1"


def test_placeholder_liff_id() -> None:
    url = build_share_url(ShareLinkConfig(), token=None, doc_id="d1")
    assert url.startswith("https://liff.line.me/YOUR_LIFF_ID?")


def test_context_from_settings() -> None:
    settings = Settings(liff_id="123-x", share_link_style="line_scheme", asset_base_url="https://cdn.example.com")
    ctx = CompileContext.from_settings(settings, doc_id="d1", share_token="t")

    assert ctx.doc_id == "d1"
    assert ctx.share_token == "t"
    assert ctx.asset_base_url == "https://cdn.example.com"
    assert ctx.share_links == ShareLinkConfig(liff_id="123-x", link_style="line_scheme")
