"""Editable card components - hero media, body blocks and footer buttons."""

from typing import Annotated, Literal

from pydantic import Field

from backend.app.models.actions import Action
from backend.app.models.common import (
    CamelModel,
    FontWeight,
    ImageSource,
    ImgMode,
    ImgRatio,
    LayoutAlign,
    SizeToken,
    SpacerSize,
    VideoSource,
)


class ComponentBase(CamelModel):
    """Fields shared by every component: stable id and enabled flag."""

    id: str
    enabled: bool = True


class HeroImage(ComponentBase):
    """Top image of a card."""

    kind: Literal["hero_image"] = "hero_image"
    image: ImageSource
    ratio: ImgRatio = "16:9"
    mode: ImgMode = "cover"


class HeroVideo(ComponentBase):
    """Top video of a card (standalone bubbles only)."""

    kind: Literal["hero_video"] = "hero_video"
    video: VideoSource
    ratio: ImgRatio | None = None
    action: Action | None = None


HeroComponent = Annotated[HeroImage | HeroVideo, Field(discriminator="kind")]


class TitleText(ComponentBase):
    kind: Literal["title"] = "title"
    text: str = ""
    size: SizeToken = "lg"
    weight: FontWeight = "bold"
    color: str = "#111111"
    align: LayoutAlign = "start"


class ParagraphText(ComponentBase):
    kind: Literal["paragraph"] = "paragraph"
    text: str = ""
    size: SizeToken = "md"
    weight: FontWeight | None = None
    color: str = "#333333"
    wrap: bool = True


class KeyValueRow(ComponentBase):
    """Label/value pair rendered as a two-cell row."""

    kind: Literal["key_value"] = "key_value"
    label: str = ""
    value: str = ""
    action: Action | None = None


class ListItem(CamelModel):
    id: str
    text: str = ""


class ListBlock(ComponentBase):
    kind: Literal["list"] = "list"
    items: list[ListItem] = Field(default_factory=list)


class Divider(ComponentBase):
    kind: Literal["divider"] = "divider"


class Spacer(ComponentBase):
    kind: Literal["spacer"] = "spacer"
    size: SpacerSize = "md"


BodyComponent = Annotated[
    TitleText | ParagraphText | KeyValueRow | ListBlock | Divider | Spacer,
    Field(discriminator="kind"),
]


class FooterButton(ComponentBase):
    """Full-width tappable footer button."""

    kind: Literal["footer_button"] = "footer_button"
    label: str = ""
    action: Action | None = None
    style: Literal["primary", "secondary"] = "primary"
    bg_color: str = "#0A84FF"
    text_color: str = "#FFFFFF"
    auto_text_color: bool = True
