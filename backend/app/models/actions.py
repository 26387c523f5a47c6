"""Tap actions attachable to buttons and key/value rows."""

from typing import Annotated, Literal

from pydantic import Field

from backend.app.models.common import CamelModel


class UriAction(CamelModel):
    """Open an absolute link."""

    type: Literal["uri"] = "uri"
    uri: str = ""


class MessageAction(CamelModel):
    """Send a canned reply as the tapping user."""

    type: Literal["message"] = "message"
    text: str = ""


class ShareAction(CamelModel):
    """Re-enter the share flow for the published document.

    Resolved at compile time into a deep link; ``uri`` is kept only for
    documents saved by older editors and is ignored by the compiler.
    """

    type: Literal["share"] = "share"
    uri: str | None = None


Action = Annotated[UriAction | MessageAction | ShareAction, Field(discriminator="type")]
