"""Tests for footer and action verification."""

import pytest

from backend.app.models import FooterButton, MessageAction, ShareAction, UriAction
from backend.app.validation.validator import verify_action, verify_footer


def make_button(
    label: str = "Open",
    action: UriAction | MessageAction | ShareAction | None = None,
    enabled: bool = True,
    **kwargs: str,
) -> FooterButton:
    """Create a footer button with a valid default action."""
    return FooterButton(
        id=f"btn-{label}",
        label=label,
        action=action if action is not None else UriAction(uri="https://example.com"),
        enabled=enabled,
        **kwargs,
    )


def codes(issues: list) -> list[str]:
    return [i.code for i in issues]


def test_three_buttons_ok() -> None:
    """Test that three enabled buttons pass."""
    footer = [make_button(f"b{i}") for i in range(3)]
    assert verify_footer(footer, "section.footer") == []


def test_four_enabled_buttons_error() -> None:
    """Test that a fourth enabled button is a footer error at the list path."""
    footer = [make_button(f"b{i}") for i in range(4)]
    issues = verify_footer(footer, "section.footer")

    assert codes(issues) == ["E_FOOTER_TOO_MANY_BUTTONS"]
    assert issues[0].path == "section.footer"


def test_disabled_buttons_do_not_count() -> None:
    """Test that disabled buttons are ignored for the cap and field checks."""
    footer = [make_button(f"b{i}") for i in range(3)]
    footer.append(make_button("", action=None, enabled=False))

    assert verify_footer(footer, "section.footer") == []


def test_empty_label_error() -> None:
    """Test that a blank label is E_TEXT_REQUIRED at the label path."""
    issues = verify_footer([make_button("   ")], "section.footer")

    assert codes(issues) == ["E_TEXT_REQUIRED"]
    assert issues[0].path == "section.footer[0].label"


def test_label_over_20_chars_error() -> None:
    """Test that labels longer than 20 characters are rejected."""
    issues = verify_footer([make_button("x" * 21)], "section.footer")
    assert codes(issues) == ["E_BUTTON_LABEL_TOO_LONG"]

    assert verify_footer([make_button("x" * 20)], "section.footer") == []


def test_missing_action_error() -> None:
    """Test that a button without an action reports E_ACTION_REQUIRED."""
    button = FooterButton(id="b", label="Go", action=None)
    issues = verify_footer([button], "cards[1].section.footer")

    assert codes(issues) == ["E_ACTION_REQUIRED"]
    assert issues[0].path == "cards[1].section.footer[0].action"


def test_bad_color_is_warning() -> None:
    """Test that malformed button colors only warn."""
    issues = verify_footer([make_button(bg_color="red", text_color="#FFF")], "section.footer")

    assert codes(issues) == ["W_COLOR_FORMAT", "W_COLOR_FORMAT"]
    assert [i.path for i in issues] == ["section.footer[0].bgColor", "section.footer[0].textColor"]
    assert all(i.level == "warn" for i in issues)


@pytest.mark.parametrize(
    "uri",
    ["https://example.com", "http://example.com", "line://ti/p/@x", "liff://app", "tel:0912345678", "HTTPS://EXAMPLE.COM"],
)
def test_allowed_schemes_pass(uri: str) -> None:
    """Test that allow-listed schemes pass, case-insensitively."""
    assert verify_action(UriAction(uri=uri), "a") == []


@pytest.mark.parametrize(
    "uri",
    [
        "javascript:alert(1)",
        "ftp://example.com",
        "example.com",
        "mailto:a@b.c",
        "  https://example.com",
        "https://example.com\n",
    ],
)
def test_disallowed_schemes_fail(uri: str) -> None:
    """Test that other schemes are E_ACTION_URI_PROTOCOL."""
    issues = verify_action(UriAction(uri=uri), "section.footer[0].action")

    assert codes(issues) == ["E_ACTION_URI_PROTOCOL"]
    assert issues[0].path == "section.footer[0].action.uri"


def test_empty_uri_invalid() -> None:
    """Test that an empty link is E_ACTION_URI_INVALID."""
    assert codes(verify_action(UriAction(uri=""), "a")) == ["E_ACTION_URI_INVALID"]


def test_uri_too_long() -> None:
    """Test the 2000-character link ceiling."""
    long_uri = "https://example.com/" + "a" * 2000
    assert codes(verify_action(UriAction(uri=long_uri), "a")) == ["E_URI_TOO_LONG"]


def test_message_action_needs_text() -> None:
    """Test that a message action with blank text is rejected at .text."""
    issues = verify_action(MessageAction(text=" "), "a")

    assert codes(issues) == ["E_MESSAGE_TEXT_REQUIRED"]
    assert issues[0].path == "a.text"
    assert verify_action(MessageAction(text="hi"), "a") == []


def test_share_action_always_valid() -> None:
    """Test that share actions have nothing to check."""
    assert verify_action(ShareAction(), "a") == []
