"""Flex Message platform limits enforced by the validator and compiler."""

# Text ceilings mirrored from the wire format
TITLE_MAX = 400
TEXT_MAX = 2000
BUTTON_LABEL_MAX = 20
URI_MAX = 2000

# Soft ceilings (warnings only)
KEY_VALUE_LABEL_MAX = 40
KEY_VALUE_VALUE_MAX = 300

FOOTER_MAX_BUTTONS = 3

# The validator is stricter than the wire format: documents over 5 cards are
# rejected, while the compiler only truncates at the platform's 10.
CAROUSEL_MAX_CARDS = 5
WIRE_CAROUSEL_MAX_CARDS = 10

ALT_TEXT_MAX = 400

VIDEO_BUBBLE_SIZES = frozenset({"kilo", "mega", "giga"})

ALLOWED_URI_PREFIXES = ("https://", "http://", "line://", "liff://", "tel:")
