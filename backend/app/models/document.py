"""Document models - bubble, carousel and folder documents."""

from typing import Annotated, Any, Literal, Union

from pydantic import Discriminator, Field, Tag, TypeAdapter

from backend.app.models.common import (
    BubbleSize,
    CamelModel,
    ImageSource,
    OverlayHeight,
    SpecialRatio,
)
from backend.app.models.components import BodyComponent, FooterButton, HeroComponent


class Section(CamelModel):
    """Regular card body: hero media, content blocks and footer buttons."""

    kind: Literal["regular"] = "regular"
    hero: list[HeroComponent] = Field(default_factory=list)
    body: list[BodyComponent] = Field(default_factory=list)
    footer: list[FooterButton] = Field(default_factory=list)


class OverlayConfig(CamelModel):
    """Bottom overlay of a full-bleed card.

    ``background_color`` may carry an alpha channel (``#RRGGBBAA``).
    """

    background_color: str = "#03303ACC"
    height: OverlayHeight = "auto"


class SpecialSection(CamelModel):
    """Full-bleed card: background image with content over a bottom overlay."""

    kind: Literal["special"] = "special"
    image: ImageSource
    ratio: SpecialRatio = "2:3"
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    body: list[BodyComponent] = Field(default_factory=list)


def _section_kind(value: Any) -> str:
    # Sections saved before special cards existed carry no kind at all
    kind = value.get("kind") if isinstance(value, dict) else getattr(value, "kind", None)
    return "special" if kind == "special" else "regular"


CardSection = Annotated[
    Union[Annotated[Section, Tag("regular")], Annotated[SpecialSection, Tag("special")]],
    Discriminator(_section_kind),
]


class Card(CamelModel):
    """One page of a carousel."""

    id: str
    name: str | None = None
    section: CardSection


class BubbleDoc(CamelModel):
    """Single card document."""

    type: Literal["bubble"] = "bubble"
    title: str = ""
    section: Section = Field(default_factory=Section)
    bubble_size: BubbleSize | None = None
    folder_id: str | None = None


class CarouselDoc(CamelModel):
    """Horizontally paged sequence of cards sent as one message."""

    type: Literal["carousel"] = "carousel"
    title: str = ""
    cards: list[Card] = Field(default_factory=list)
    bubble_size: BubbleSize | None = None
    folder_id: str | None = None


class FolderDoc(CamelModel):
    """Organizational container; never compiled."""

    type: Literal["folder"] = "folder"
    id: str
    name: str
    parent_id: str | None = None


Document = Annotated[BubbleDoc | CarouselDoc | FolderDoc, Field(discriminator="type")]

_document_adapter = TypeAdapter(Document)


def parse_document(data: Any) -> BubbleDoc | CarouselDoc | FolderDoc:
    """Parse editor JSON into a typed document.

    Raises:
        pydantic.ValidationError: If the payload does not match any document shape
    """
    return _document_adapter.validate_python(data)


def document_title(doc: BubbleDoc | CarouselDoc | FolderDoc) -> str:
    """Display title of any document kind."""
    if isinstance(doc, FolderDoc):
        return doc.name
    return doc.title
