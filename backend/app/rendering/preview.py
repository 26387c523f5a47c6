"""Approximate HTML preview of a Flex Message.

Handles exactly the node types the compiler emits. Key/value actions are read
from the value text cell, matching where the compiler attaches them.
"""

from html import escape
from typing import Any

from backend.app.models import wire

_SIZE_PX = {"xxs": 10, "xs": 11, "sm": 13, "md": 15, "lg": 18, "xl": 21, "xxl": 24}
_SPACING_PX = {"none": 0, "xs": 2, "sm": 4, "md": 8, "lg": 12, "xl": 16, "xxl": 20}
_BUBBLE_WIDTH_PX = {"nano": 120, "micro": 160, "kilo": 260, "mega": 300, "giga": 386}
_ALIGN = {"start": "left", "center": "center", "end": "right"}


def _style(**props: Any) -> str:
    parts = [f"{k.replace('_', '-')}:{v}" for k, v in props.items() if v is not None]
    return escape(";".join(parts), quote=True)


def _ratio_padding(ratio: str | None) -> str:
    try:
        w, h = (float(x) for x in (ratio or "1:1").split(":"))
        return f"{h / w * 100:.2f}%"
    except ValueError:
        return "100%"


def _action_href(action: wire.UriAction | wire.MessageAction | None) -> str | None:
    if isinstance(action, wire.UriAction):
        return action.uri
    return None


def render_node(node: wire.Box | wire.Text | wire.Image | wire.Video | wire.Button | wire.Separator | wire.Spacer) -> str:
    """Render one wire node."""
    match node:
        case wire.Box():
            direction = "column" if node.layout == "vertical" else "row"
            gap = _SPACING_PX.get(node.spacing or "none", 0)
            style = _style(
                display="flex",
                flex_direction=direction,
                align_items="baseline" if node.layout == "baseline" else None,
                gap=f"{gap}px",
                background=node.background_color,
                border_radius=node.corner_radius,
                padding=node.padding_all,
                position=node.position,
                top=node.offset_top,
                bottom=node.offset_bottom,
                left=node.offset_start,
                right=node.offset_end,
                height=node.height,
                justify_content=node.justify_content,
            )
            inner = "".join(render_node(child) for child in node.contents)
            return f'<div class="flex-box" style="{style}">{inner}</div>'
        case wire.Text():
            style = _style(
                font_size=f"{_SIZE_PX.get(node.size or 'md', 15)}px",
                color=node.color,
                font_weight="700" if node.weight == "bold" else None,
                text_align=_ALIGN.get(node.align or ""),
                white_space="pre-wrap" if node.wrap else "nowrap",
                flex=node.flex,
            )
            text = escape(node.text)
            href = _action_href(node.action)
            if href:
                text = f'<a href="{escape(href, quote=True)}">{text}</a>'
            return f'<div class="flex-text" style="{style}">{text}</div>'
        case wire.Image():
            style = _style(
                position="relative",
                width="100%",
                padding_top=_ratio_padding(node.aspect_ratio),
                background_image=f"url('{node.url}')",
                background_size="contain" if node.aspect_mode == "fit" else "cover",
                background_position=node.gravity or "center",
                background_repeat="no-repeat",
            )
            return f'<div class="flex-image" style="{style}"></div>'
        case wire.Video():
            poster = escape(node.preview_url, quote=True)
            src = escape(node.url, quote=True)
            return f'<video class="flex-video" controls poster="{poster}" src="{src}" style="width:100%"></video>'
        case wire.Button():
            style = _style(
                display="block",
                background=node.color,
                color="#FFFFFF" if node.style == "primary" else "#111111",
                text_align="center",
                font_weight="700",
                border_radius="6px",
                padding="10px" if node.height != "sm" else "6px",
                text_decoration="none",
            )
            href = escape(_action_href(node.action) or "#", quote=True)
            label = escape(node.action.label or "")
            return f'<a class="flex-button" href="{href}" style="{style}">{label}</a>'
        case wire.Separator():
            return '<hr class="flex-separator" style="border:none;border-top:1px solid #E5E5EA;width:100%">'
        case wire.Spacer():
            return f'<div class="flex-spacer" style="height:{_SPACING_PX.get(node.size, 8)}px"></div>'


def render_bubble(bubble: wire.Bubble) -> str:
    """Render a bubble card with hero, body and footer blocks."""
    width = _BUBBLE_WIDTH_PX.get(bubble.size or "mega", 300)
    parts: list[str] = []
    if bubble.hero is not None:
        parts.append(render_node(bubble.hero))
    if bubble.body is not None:
        padding = bubble.body.padding_all or "16px"
        parts.append(f'<div class="flex-body" style="position:relative;padding:{escape(padding)}">{render_node(bubble.body)}</div>')
    if bubble.footer is not None:
        parts.append(f'<div class="flex-footer" style="padding:8px 16px 16px">{render_node(bubble.footer)}</div>')
    style = _style(
        width=f"{width}px",
        flex="none",
        background="#FFFFFF",
        border_radius="12px",
        overflow="hidden",
        box_shadow="0 1px 3px rgba(0,0,0,0.15)",
    )
    return f'<div class="flex-bubble" style="{style}">{"".join(parts)}</div>'


def render_preview_html(message: wire.FlexMessage | dict[str, Any]) -> str:
    """Render a compiled message (model or stored JSON) to HTML.

    Raises:
        pydantic.ValidationError: If a stored JSON payload is not a Flex Message
    """
    if isinstance(message, dict):
        message = wire.FlexMessage.model_validate(message)

    contents = message.contents
    if isinstance(contents, wire.Carousel):
        cards = "".join(render_bubble(b) for b in contents.contents)
        body = f'<div class="flex-carousel" style="display:flex;gap:8px;overflow-x:auto">{cards}</div>'
    else:
        body = render_bubble(contents)

    return f'<div class="flex-preview" title="{escape(message.alt_text, quote=True)}">{body}</div>'
