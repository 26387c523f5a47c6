"""Hex color helpers."""

import re

_HEX_RGB = re.compile(r"#[0-9a-fA-F]{6}")
_HEX_RGBA = re.compile(r"#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?")


def is_hex_color(value: str | None) -> bool:
    """True for ``#RRGGBB``."""
    if not value:
        return False
    return _HEX_RGB.fullmatch(value) is not None


def is_hex_color_with_alpha(value: str | None) -> bool:
    """True for ``#RRGGBB`` or ``#RRGGBBAA``."""
    if not value:
        return False
    return _HEX_RGBA.fullmatch(value) is not None


def auto_text_color(bg_hex: str) -> str:
    """Pick dark or light label text for a background color.

    Uses relative luminance; anything brighter than 0.6 gets dark text.
    Unparseable colors fall back to white text.
    """
    if not is_hex_color_with_alpha(bg_hex):
        return "#FFFFFF"
    hex_digits = bg_hex[1:7]
    r = int(hex_digits[0:2], 16) / 255
    g = int(hex_digits[2:4], 16) / 255
    b = int(hex_digits[4:6], 16) / 255
    luminance = 0.2126 * r + 0.7152 * g + 0.0722 * b
    return "#111111" if luminance > 0.6 else "#FFFFFF"
