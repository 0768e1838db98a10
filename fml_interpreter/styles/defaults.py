"""
Default styles for FML items.

Every builtin item kind starts from a hardcoded style before type selectors,
named styles and ad hoc modifiers are applied.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from .style_model import Color, Decoration, FontFamily, FontWeight, Style


class ItemKind(Enum):
    TEXT = "text"
    BOX = "box"
    VBOX = "vbox"
    INLINE = "inline"
    LINK = "^"
    BINARY = "&"
    ANCHOR = "#"


# list head (None for an unnamed text list) -> item kind
BUILTIN_KINDS: Mapping[Optional[str], ItemKind] = MappingProxyType({
    None: ItemKind.TEXT,
    "text": ItemKind.TEXT,
    "box": ItemKind.BOX,
    "vbox": ItemKind.VBOX,
    "inline": ItemKind.INLINE,
    "^": ItemKind.LINK,
    "&": ItemKind.BINARY,
    "#": ItemKind.ANCHOR,
})

# style-block rule names that act as type selectors
SELECTOR_KINDS: Mapping[str, ItemKind] = MappingProxyType({
    "text": ItemKind.TEXT,
    "box": ItemKind.BOX,
    "vbox": ItemKind.VBOX,
    "inline": ItemKind.INLINE,
    "^": ItemKind.LINK,
    "&": ItemKind.BINARY,
})

BASE_STYLE = Style(
    font_family=FontFamily.SANS,
    weight=FontWeight.NORMAL,
    decorations=frozenset(),
    foreground=Color(0x30, 0x30, 0x30),
    background=None,
    size=12.0,
)

LINK_STYLE = Style(
    font_family=FontFamily.SANS,
    weight=FontWeight.NORMAL,
    decorations=frozenset({Decoration.UNDERLINE}),
    foreground=Color(0x00, 0x00, 0xEE),
    background=None,
    size=12.0,
)

DEFAULT_STYLES: Mapping[ItemKind, Style] = MappingProxyType({
    ItemKind.TEXT: BASE_STYLE,
    ItemKind.BOX: BASE_STYLE,
    ItemKind.VBOX: BASE_STYLE,
    ItemKind.INLINE: BASE_STYLE,
    ItemKind.LINK: LINK_STYLE,
    ItemKind.BINARY: BASE_STYLE,
    ItemKind.ANCHOR: BASE_STYLE,
})


def default_style(kind: ItemKind) -> Style:
    """Builtin style for an item kind."""
    return DEFAULT_STYLES[kind]
