"""
Canonical markup writer.

Serializes a built document back to FML. Styles are written already
resolved: every item carries, as ad hoc modifiers, the attributes where its
style differs from the builtin default of its kind, so the output does not
depend on the original style block. The one exception is the page root,
which cannot carry modifiers; when its style differs from the default a
``vbox`` rule is emitted and other vboxes are written relative to it.

Text items always carry a style list (``{}`` when empty) so that reparsing
does not fold neighbouring texts together. Reparsing and rebuilding the
output gives a document with an equal root.
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

from ..models.nodes import Anchor, BinaryRef, Box, Document, DocumentNode, Inline, Link, Text, VBox
from ..styles.defaults import ItemKind, default_style
from ..styles.style_model import Decoration, FontFamily, FontWeight, Style

FAMILY_MODIFIERS = {
    FontFamily.SERIF: "serif",
    FontFamily.SANS: "sans",
    FontFamily.MONO: "mono",
}

DECORATION_MODIFIERS = {
    Decoration.UNDERLINE: "underline",
    Decoration.STRIKE: "strike",
    Decoration.ITALIC: "italic",
}


def quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_number(value: float) -> str:
    short = f"{value:g}"
    return short if float(short) == value else repr(float(value))


def style_modifiers(style: Style, base: Style) -> List[str]:
    """Modifiers that turn ``base`` into ``style``, in canonical order."""
    modifiers: List[str] = []
    if style.font_family is not base.font_family:
        modifiers.append(FAMILY_MODIFIERS[style.font_family])
    if style.weight is not base.weight:
        modifiers.append("bold" if style.weight is FontWeight.BOLD else "normal")
    cleared = bool(base.decorations - style.decorations)
    if cleared:
        modifiers.append("plain")
    for decoration in style.sorted_decorations():
        if cleared or decoration not in base.decorations:
            modifiers.append(DECORATION_MODIFIERS[decoration])
    if style.foreground != base.foreground:
        modifiers.append(f"(fg {quote(style.foreground.to_hex())})")
    if style.background is not None and style.background != base.background:
        modifiers.append(f"(bg {quote(style.background.to_hex())})")
    if style.size != base.size:
        modifiers.append(f"(size {quote(format_number(style.size))})")
    if style.fill is not None and style.fill != base.fill:
        modifiers.append(f"(fill {quote(format_number(style.fill))})")
    if style.scale is not None and style.scale != base.scale:
        modifiers.append(f"(scale {quote(format_number(style.scale))})")
    return modifiers


class MarkupWriter:
    """Writes documents as canonical FML."""

    def __init__(self, indent: str = "  "):
        self.indent = indent
        self._vbox_base: Style = default_style(ItemKind.VBOX)

    def write(self, document: Document) -> str:
        parts: List[str] = []
        root_style = document.root.style
        self._vbox_base = root_style
        root_modifiers = style_modifiers(root_style, default_style(ItemKind.VBOX))
        if root_modifiers:
            parts.append(f"{{ (vbox {' '.join(root_modifiers)}) }}\n")

        # entries are nodes to write, or closing parens
        stack: List[Tuple[Union[DocumentNode, str], int]] = [
            (child, 0) for child in reversed(document.root.children)
        ]
        while stack:
            entry, level = stack.pop()
            prefix = self.indent * level
            if isinstance(entry, str):
                parts.append(f"{prefix}{entry}\n")
            elif isinstance(entry, (Box, VBox, Inline)):
                head = self._head(entry)
                if not entry.children:
                    parts.append(f"{prefix}({head})\n")
                    continue
                parts.append(f"{prefix}({head}\n")
                stack.append((")", level))
                stack.extend((child, level + 1) for child in reversed(entry.children))
            else:
                parts.append(f"{prefix}{self._leaf(entry)}\n")
        return "".join(parts)

    @staticmethod
    def _style_list(style: Style, base: Style, always: bool = False) -> Optional[str]:
        modifiers = style_modifiers(style, base)
        if not modifiers and not always:
            return None
        return "{" + " ".join(modifiers) + "}"

    def _head(self, node: DocumentNode) -> str:
        if isinstance(node, VBox):
            name, base = "vbox", self._vbox_base
        elif isinstance(node, Box):
            name, base = "box", default_style(ItemKind.BOX)
        else:
            name, base = "inline", default_style(ItemKind.INLINE)
        style_list = self._style_list(node.style, base)
        return f"{name} {style_list}" if style_list else name

    def _leaf(self, node: DocumentNode) -> str:
        if isinstance(node, Text):
            style_list = self._style_list(node.style, default_style(ItemKind.TEXT), always=True)
            return f"({style_list} {quote(node.content)})"
        if isinstance(node, Anchor):
            return f"(# {quote(node.name)})"
        if isinstance(node, Link):
            parts = ["^", self._style_list(node.style, default_style(ItemKind.LINK)), quote(node.url)]
            if node.text is not None:
                parts.append(quote(node.text))
        elif isinstance(node, BinaryRef):
            parts = ["&", self._style_list(node.style, default_style(ItemKind.BINARY)), quote(node.name)]
            if node.alt_text is not None:
                parts.append(quote(node.alt_text))
        else:
            raise TypeError(f"not a document node: {node!r}")
        return "(" + " ".join(part for part in parts if part) + ")"


def to_markup(document: Document, indent: str = "  ") -> str:
    """Serialize ``document`` as canonical markup."""
    return MarkupWriter(indent).write(document)
