"""Share hand-off helpers for the in-app share target picker."""

from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import parse_qs, unquote

from backend.app.validation import limits

MAX_SHARE_MESSAGES = 5
DEFAULT_ALT_TEXT = "Flex Message"


class ShareRejectedError(Exception):
    """Stored message fails the structural check before sharing."""

    pass


class ShareOutcome(str, Enum):
    SENT = "sent"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ShareParams:
    """What the share page was opened with."""

    token: str | None = None
    doc_id: str | None = None
    autoshare: bool = False


def _first(query: dict[str, list[str]], key: str) -> str | None:
    values = query.get(key)
    return values[0] if values else None


def parse_share_params(query: str | dict[str, str]) -> ShareParams:
    """Read ``token``, ``id`` and ``autoshare`` from a share-page query.

    The platform may wrap the real route in ``liff.state`` (``/share?token=..``,
    ``?token=..`` or ``token=..``); nested values are used when the outer query
    carries neither a token nor an id.

    Args:
        query: Raw query string or already-parsed single-valued mapping

    Returns:
        Parsed parameters
    """
    if isinstance(query, dict):
        parsed = {k: [v] for k, v in query.items()}
    else:
        parsed = parse_qs(query.lstrip("?"))

    token = _first(parsed, "token")
    doc_id = _first(parsed, "id")
    autoshare = _first(parsed, "autoshare") == "1"

    state = _first(parsed, "liff.state")
    if not token and not doc_id and state:
        decoded = unquote(state)
        if "?" in decoded:
            inner_query = decoded.rsplit("?", 1)[1]
        elif decoded.startswith("/"):
            inner_query = ""
        else:
            inner_query = decoded
        inner = parse_qs(inner_query)
        token = _first(inner, "token") or token
        doc_id = _first(inner, "id") or doc_id
        autoshare = _first(inner, "autoshare") == "1" or autoshare

    return ShareParams(token=token, doc_id=doc_id, autoshare=autoshare)


def verify_share_contents(contents: Any) -> None:
    """Structural check run before handing contents to the picker.

    Raises:
        ShareRejectedError: If contents is not a bubble or a carousel of at most 10
    """
    if not isinstance(contents, dict):
        raise ShareRejectedError("message has no flex contents")

    kind = contents.get("type")
    if kind not in ("bubble", "carousel"):
        raise ShareRejectedError(f"contents.type must be bubble or carousel, got {kind!r}")

    if kind == "carousel":
        bubbles = contents.get("contents")
        if not isinstance(bubbles, list):
            raise ShareRejectedError("carousel.contents must be a list")
        if len(bubbles) > limits.WIRE_CAROUSEL_MAX_CARDS:
            raise ShareRejectedError(
                f"carousel has {len(bubbles)} bubbles (max {limits.WIRE_CAROUSEL_MAX_CARDS})"
            )


def _split_video_hero(bubble: dict[str, Any]) -> tuple[dict[str, Any] | None, dict[str, Any]]:
    # The picker cannot carry video inside flex: send it as its own message and
    # fall back to the preview frame as the hero image
    hero = bubble.get("hero")
    if not isinstance(hero, dict) or hero.get("type") != "video":
        return None, bubble

    preview_url = hero.get("previewUrl") or (hero.get("altContent") or {}).get("url")
    video_message = {
        "type": "video",
        "originalContentUrl": hero.get("url"),
        "previewImageUrl": preview_url,
    }

    without_video = {k: v for k, v in bubble.items() if k != "hero"}
    if preview_url:
        without_video["hero"] = {
            "type": "image",
            "url": preview_url,
            "size": "full",
            "aspectRatio": hero.get("aspectRatio") or "16:9",
            "aspectMode": "cover",
        }
    return video_message, without_video


def build_share_messages(flex_json: dict[str, Any]) -> list[dict[str, Any]]:
    """Message array for the share target picker.

    A bubble with a video hero becomes a video message followed by the flex
    message with the video replaced by its preview frame.

    Args:
        flex_json: Stored wire message (``{"type": "flex", "altText", "contents"}``)

    Returns:
        One to five messages

    Raises:
        ShareRejectedError: If the stored message fails the structural check
    """
    contents = flex_json.get("contents")
    verify_share_contents(contents)
    alt_text = flex_json.get("altText") or DEFAULT_ALT_TEXT

    messages: list[dict[str, Any]] = []
    if contents["type"] == "bubble":
        video_message, contents = _split_video_hero(contents)
        if video_message is not None:
            messages.append(video_message)
    messages.append({"type": "flex", "altText": alt_text, "contents": contents})

    if len(messages) > MAX_SHARE_MESSAGES:
        raise ShareRejectedError(f"{len(messages)} messages (max {MAX_SHARE_MESSAGES})")
    return messages


def interpret_share_result(result: Any) -> ShareOutcome:
    """Map the picker's return value: nothing back means the user cancelled."""
    if result is None:
        return ShareOutcome.CANCELLED
    return ShareOutcome.SENT
