"""Document to Flex Message compiler.

Pure given (document, context). No validation happens here: missing or
malformed optional data is omitted so live previews of drafts still render.
"""

from collections.abc import Sequence

from backend.app.compiler.context import CompileContext
from backend.app.compiler.share_links import build_share_url
from backend.app.models import wire
from backend.app.models.actions import Action, MessageAction, ShareAction, UriAction
from backend.app.models.components import (
    BodyComponent,
    Divider,
    FooterButton,
    HeroComponent,
    HeroImage,
    HeroVideo,
    KeyValueRow,
    ListBlock,
    ParagraphText,
    Spacer,
    TitleText,
)
from backend.app.models.document import (
    BubbleDoc,
    CarouselDoc,
    FolderDoc,
    Section,
    SpecialSection,
)
from backend.app.utils.colors import is_hex_color, is_hex_color_with_alpha
from backend.app.validation import limits
from backend.app.validation.validator import select_hero

DEFAULT_ALT_TEXT = "Flex Message"
EMPTY_BODY_TEXT = "(empty)"
BULLET = "• "

MUTED_COLOR = "#8E8E93"
VALUE_COLOR = "#111111"
DEFAULT_BUTTON_COLOR = "#0A84FF"
DEFAULT_OVERLAY_COLOR = "#03303ACC"
DEFAULT_VIDEO_RATIO = "16:9"


class NotCompilableError(Exception):
    """The caller asked to compile a document kind that has no wire form."""

    pass


def resolve_image_url(url: str | None, asset_base_url: str | None) -> str | None:
    """Absolute HTTPS URL for an image, or None when none can be derived.

    Same-origin paths are resolved against ``asset_base_url``.
    """
    if not url:
        return None
    if url.startswith("https://"):
        return url
    if url.startswith("//"):
        return f"https:{url}"
    if url.startswith("/") and asset_base_url:
        resolved = f"{asset_base_url.rstrip('/')}{url}"
        if resolved.startswith("https://"):
            return resolved
    return None


def compile_action(action: Action, ctx: CompileContext, label: str | None = None) -> wire.UriAction | wire.MessageAction:
    """Map a document action to a wire action; ``share`` becomes a deep link."""
    match action:
        case UriAction(uri=uri):
            return wire.UriAction(uri=uri, label=label)
        case MessageAction(text=text):
            return wire.MessageAction(text=text, label=label)
        case ShareAction():
            uri = build_share_url(ctx.share_links, token=ctx.share_token, doc_id=ctx.doc_id)
            return wire.UriAction(uri=uri, label=label)


def compile_hero(hero: Sequence[HeroComponent], ctx: CompileContext) -> wire.Image | wire.Video | None:
    """Compile the single rendered hero, if any."""
    selected = select_hero(hero)
    if selected is None:
        return None

    _, item = selected
    match item:
        case HeroImage():
            url = resolve_image_url(item.image.url, ctx.asset_base_url)
            if url is None:
                return None
            return wire.Image(
                url=url,
                size="full",
                aspect_ratio=item.ratio,
                aspect_mode="fit" if item.mode == "contain" else "cover",
            )
        case HeroVideo():
            video = item.video
            if not video.url or not video.preview_url:
                return None
            preview_url = resolve_image_url(video.preview_url, ctx.asset_base_url) or video.preview_url
            ratio = item.ratio or DEFAULT_VIDEO_RATIO
            return wire.Video(
                url=video.url,
                preview_url=preview_url,
                aspect_ratio=ratio,
                alt_content=wire.Image(
                    url=preview_url,
                    size="full",
                    aspect_ratio=ratio,
                    aspect_mode="cover",
                ),
            )


def _text_color(color: str | None) -> str | None:
    return color if is_hex_color_with_alpha(color) else None


def compile_component(component: BodyComponent, ctx: CompileContext) -> wire.Box | wire.Text | wire.Separator | wire.Spacer:
    """Map one body component to exactly one wire node."""
    match component:
        case TitleText():
            return wire.Text(
                text=component.text,
                weight="bold" if component.weight == "bold" else "regular",
                size=component.size,
                color=_text_color(component.color),
                align=component.align,
                wrap=True,
            )
        case ParagraphText():
            return wire.Text(
                text=component.text,
                size=component.size,
                color=_text_color(component.color),
                weight=component.weight,
                wrap=True,
            )
        case KeyValueRow():
            # The action sits on the value cell, not the row
            value_action = compile_action(component.action, ctx) if component.action else None
            return wire.Box(
                layout="horizontal",
                spacing="sm",
                contents=[
                    wire.Text(text=component.label, size="sm", color=MUTED_COLOR, flex=2, wrap=True),
                    wire.Text(
                        text=component.value,
                        size="sm",
                        color=VALUE_COLOR,
                        flex=5,
                        wrap=True,
                        action=value_action,
                    ),
                ],
            )
        case ListBlock():
            return wire.Box(
                layout="vertical",
                spacing="sm",
                contents=[
                    wire.Text(text=BULLET + item.text, size="sm", color=VALUE_COLOR, wrap=True)
                    for item in component.items
                ],
            )
        case Divider():
            return wire.Separator(margin="md")
        case Spacer():
            return wire.Spacer(size=component.size)


def compile_body_contents(body: Sequence[BodyComponent], ctx: CompileContext) -> list[wire.Box | wire.Text | wire.Separator | wire.Spacer]:
    """Enabled components in document order; an empty body gets one muted placeholder."""
    contents = [compile_component(c, ctx) for c in body if c.enabled]
    if not contents:
        return [wire.Text(text=EMPTY_BODY_TEXT, size="sm", color=MUTED_COLOR, wrap=True)]
    return contents


def compile_footer(footer: Sequence[FooterButton], ctx: CompileContext) -> wire.Box | None:
    """Native button nodes for the first 3 enabled buttons."""
    enabled = [b for b in footer if b.enabled][: limits.FOOTER_MAX_BUTTONS]
    buttons = [
        wire.Button(
            style="primary",
            color=b.bg_color if is_hex_color(b.bg_color) else DEFAULT_BUTTON_COLOR,
            action=compile_action(b.action, ctx, label=b.label),
            height="sm",
        )
        for b in enabled
        if b.action is not None
    ]
    if not buttons:
        return None
    return wire.Box(layout="vertical", spacing="sm", contents=buttons)


def compile_section(section: Section, ctx: CompileContext, size: str | None = None) -> wire.Bubble:
    """Regular card: optional hero, body, optional footer."""
    return wire.Bubble(
        size=size,
        hero=compile_hero(section.hero, ctx),
        body=wire.Box(
            layout="vertical",
            spacing="md",
            contents=compile_body_contents(section.body, ctx),
        ),
        footer=compile_footer(section.footer, ctx),
    )


def compile_special_section(section: SpecialSection, ctx: CompileContext, size: str | None = None) -> wire.Bubble:
    """Full-bleed card: background image plus an overlay anchored to the bottom edge.

    An explicit overlay height bottom-justifies its content; ``auto`` lets the
    overlay size to its content.
    """
    overlay = section.overlay
    explicit_height = overlay.height != "auto"
    background = overlay.background_color
    if not is_hex_color_with_alpha(background):
        background = DEFAULT_OVERLAY_COLOR

    image_url = resolve_image_url(section.image.url, ctx.asset_base_url) or section.image.url

    return wire.Bubble(
        size=size,
        body=wire.Box(
            layout="vertical",
            padding_all="0px",
            contents=[
                wire.Image(
                    url=image_url,
                    size="full",
                    aspect_ratio=section.ratio,
                    aspect_mode="cover",
                    gravity="top",
                ),
                wire.Box(
                    layout="vertical",
                    position="absolute",
                    offset_bottom="0px",
                    offset_start="0px",
                    offset_end="0px",
                    background_color=background,
                    padding_all="20px",
                    spacing="md",
                    height=overlay.height if explicit_height else None,
                    justify_content="flex-end" if explicit_height else None,
                    contents=compile_body_contents(section.body, ctx),
                ),
            ],
        ),
    )


def compile_card(section: Section | SpecialSection, ctx: CompileContext, size: str | None = None) -> wire.Bubble:
    """Dispatch a card section by kind."""
    match section:
        case SpecialSection():
            return compile_special_section(section, ctx, size)
        case Section():
            return compile_section(section, ctx, size)


def resolve_alt_text(title: str, ctx: CompileContext) -> str:
    """Explicit override, then document title, then a fixed default; never empty."""
    for candidate in (ctx.alt_text, title):
        if candidate and candidate.strip():
            return candidate.strip()[: limits.ALT_TEXT_MAX]
    return DEFAULT_ALT_TEXT


def compile_document(doc: BubbleDoc | CarouselDoc | FolderDoc, ctx: CompileContext | None = None) -> wire.FlexMessage:
    """Compile a document into a Flex Message.

    Carousels are truncated to the platform's 10-card ceiling silently.

    Args:
        doc: Bubble or carousel document
        ctx: Compile context (defaults to an empty preview context)

    Returns:
        Wire-format message

    Raises:
        NotCompilableError: If given a folder
    """
    ctx = ctx or CompileContext()

    match doc:
        case BubbleDoc():
            contents: wire.Bubble | wire.Carousel = compile_section(doc.section, ctx, doc.bubble_size)
        case CarouselDoc():
            cards = doc.cards[: limits.WIRE_CAROUSEL_MAX_CARDS]
            contents = wire.Carousel(
                contents=[compile_card(card.section, ctx, doc.bubble_size) for card in cards]
            )
        case FolderDoc():
            raise NotCompilableError("folders have no wire format")

    return wire.FlexMessage(alt_text=resolve_alt_text(doc.title, ctx), contents=contents)
