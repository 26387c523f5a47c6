"""Wire format models - the nested Flex Message JSON the platform renders.

Field names and nesting are the platform's; dump with ``to_wire()`` so unset
optional fields are omitted rather than sent as null.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for wire nodes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize exactly as sent to the platform."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UriAction(WireModel):
    type: Literal["uri"] = "uri"
    uri: str
    label: str | None = None


class MessageAction(WireModel):
    type: Literal["message"] = "message"
    text: str
    label: str | None = None


WireAction = Annotated[UriAction | MessageAction, Field(discriminator="type")]


class Text(WireModel):
    type: Literal["text"] = "text"
    text: str
    size: str | None = None
    color: str | None = None
    weight: Literal["regular", "bold"] | None = None
    align: str | None = None
    wrap: bool = True
    flex: int | None = None
    action: WireAction | None = None


class Image(WireModel):
    type: Literal["image"] = "image"
    url: str
    size: str | None = None
    aspect_ratio: str | None = None
    aspect_mode: Literal["cover", "fit"] | None = None
    gravity: str | None = None


class Video(WireModel):
    type: Literal["video"] = "video"
    url: str
    preview_url: str
    aspect_ratio: str
    alt_content: Image


class Button(WireModel):
    type: Literal["button"] = "button"
    style: Literal["primary", "secondary", "link"] = "primary"
    color: str | None = None
    action: WireAction
    height: Literal["sm", "md"] | None = None


class Separator(WireModel):
    type: Literal["separator"] = "separator"
    margin: str | None = None


class Spacer(WireModel):
    type: Literal["spacer"] = "spacer"
    size: str


class Box(WireModel):
    type: Literal["box"] = "box"
    layout: Literal["vertical", "horizontal", "baseline"]
    contents: list["WireNode"] = Field(default_factory=list)
    spacing: str | None = None
    background_color: str | None = None
    corner_radius: str | None = None
    padding_all: str | None = None
    position: Literal["relative", "absolute"] | None = None
    offset_top: str | None = None
    offset_bottom: str | None = None
    offset_start: str | None = None
    offset_end: str | None = None
    height: str | None = None
    justify_content: str | None = None
    action: WireAction | None = None


WireNode = Annotated[
    Box | Text | Image | Video | Button | Separator | Spacer,
    Field(discriminator="type"),
]

Box.model_rebuild()

HeroNode = Annotated[Image | Video, Field(discriminator="type")]


class Bubble(WireModel):
    type: Literal["bubble"] = "bubble"
    size: str | None = None
    hero: HeroNode | None = None
    body: Box | None = None
    footer: Box | None = None


class Carousel(WireModel):
    type: Literal["carousel"] = "carousel"
    contents: list[Bubble] = Field(default_factory=list)


FlexContents = Annotated[Bubble | Carousel, Field(discriminator="type")]


class FlexMessage(WireModel):
    """Top-level message handed to the share invocation."""

    type: Literal["flex"] = "flex"
    alt_text: str
    contents: FlexContents
