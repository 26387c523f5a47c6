"""Starter documents for the editor and template cloning."""

from datetime import datetime, timezone
from typing import Any, cast

from backend.app.models.actions import UriAction
from backend.app.models.common import CheckLevel, ExternalImage, ImageCheckResult
from backend.app.models.components import (
    FooterButton,
    HeroImage,
    KeyValueRow,
    ListBlock,
    ParagraphText,
    TitleText,
)
from backend.app.models.document import (
    BubbleDoc,
    Card,
    CarouselDoc,
    FolderDoc,
    OverlayConfig,
    Section,
    SpecialSection,
)
from backend.app.utils.colors import auto_text_color
from backend.app.utils.ids import new_id
from backend.app.validation import limits

PLACEHOLDER_URL = "/placeholder.svg"
EXAMPLE_URI = "https://example.com"


def placeholder_image() -> ExternalImage:
    """Same-origin placeholder; counts as checked so seeds start publishable."""
    return ExternalImage(
        url=PLACEHOLDER_URL,
        last_check=ImageCheckResult(
            ok=True,
            level=CheckLevel.PASS,
            checked_at=datetime.now(timezone.utc),
        ),
    )


def default_button(label: str, uri: str, bg_color: str) -> FooterButton:
    return FooterButton(
        id=new_id("btn_"),
        label=label,
        action=UriAction(uri=uri),
        bg_color=bg_color,
        text_color=auto_text_color(bg_color),
    )


def _hero() -> HeroImage:
    return HeroImage(id=new_id("hero_"), image=placeholder_image())


def seed_bubble(title: str = "New draft (bubble)") -> BubbleDoc:
    """Single card with a hero, title, intro, contact row and two buttons."""
    return BubbleDoc(
        title=title,
        section=Section(
            hero=[_hero()],
            body=[
                TitleText(id=new_id("t_"), text="Your headline"),
                ParagraphText(id=new_id("p_"), text="A short introduction (line breaks allowed)"),
                KeyValueRow(
                    id=new_id("kv_"),
                    label="Phone",
                    value="0912-345-678",
                    action=UriAction(uri=EXAMPLE_URI),
                ),
            ],
            footer=[
                default_button("Learn more", EXAMPLE_URI, "#0A84FF"),
                default_button("Share", EXAMPLE_URI, "#34C759").model_copy(update={"style": "secondary"}),
            ],
        ),
    )


def seed_carousel(card_count: int = 3, title: str = "New draft (carousel)") -> CarouselDoc:
    """Carousel of identical starter cards; ``card_count`` is clamped to 1..5."""
    count = max(1, min(limits.CAROUSEL_MAX_CARDS, card_count))
    cards = [
        Card(
            id=new_id("card_"),
            section=Section(
                hero=[_hero()],
                body=[
                    TitleText(id=new_id("t_"), text=f"Plan {chr(65 + i)} | Most popular"),
                    ParagraphText(id=new_id("p_"), text="Short description..."),
                ],
                footer=[default_button("View details", EXAMPLE_URI, "#0A84FF")],
            ),
        )
        for i in range(count)
    ]
    return CarouselDoc(title=title, cards=cards)


def seed_special_section() -> SpecialSection:
    """Full-bleed card with a translucent overlay."""
    return SpecialSection(
        image=placeholder_image(),
        overlay=OverlayConfig(),
        body=[
            TitleText(id=new_id("t_"), text="Your headline", color="#FFFFFF"),
            ParagraphText(id=new_id("p_"), text="Short description...", color="#FFFFFF"),
            ListBlock(id=new_id("l_"), items=[]),
        ],
    )


def seed_special_carousel(title: str = "New draft (special)") -> CarouselDoc:
    """Carousel holding one full-bleed card."""
    return CarouselDoc(
        title=title,
        cards=[Card(id=new_id("card_"), name="Special", section=seed_special_section())],
    )


def _fresh_ids(node: object) -> object:
    if isinstance(node, dict):
        out = {k: _fresh_ids(v) for k, v in node.items()}
        if isinstance(out.get("id"), str):
            out["id"] = new_id()
        return out
    if isinstance(node, list):
        return [_fresh_ids(v) for v in node]
    return node


def clone_document(doc: BubbleDoc | CarouselDoc, title: str | None = None) -> BubbleDoc | CarouselDoc:
    """Deep copy of a saved template with every component and card id regenerated."""
    data = cast(dict[str, Any], _fresh_ids(doc.model_dump(mode="json", by_alias=True)))
    if title is not None:
        data["title"] = title
    return type(doc).model_validate(data)


def seed_folder(name: str, parent_id: str | None = None) -> FolderDoc:
    return FolderDoc(id=new_id("folder_"), name=name, parent_id=parent_id)
