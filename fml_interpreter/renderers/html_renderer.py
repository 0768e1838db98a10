"""
HTMLRenderer - FML document to a standalone HTML page
------------------------------------------------------

Boxes become flexbox ``<div>`` rows, vboxes ``<div>`` columns, text and
inline flows ``<span>``, links ``<a>``, binary references ``<img>`` and
anchors hidden ``<div id>`` targets. The style block is carried over as CSS:
named styles as classes, type selectors as element rules. Each element also
gets an inline ``style`` with its resolved style where it differs from the
builtin default of its kind.

A small script scrolls to the URL fragment on load so anchors work the way
they do in a native client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from html import escape
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..exceptions import RenderingError
from ..models.nodes import Anchor, BinaryRef, Box, Document, DocumentNode, Inline, Link, Text, VBox
from ..styles.defaults import SELECTOR_KINDS, ItemKind, default_style
from ..styles.style_model import Decoration, FontFamily, FontWeight, Style, apply_patches

logger = logging.getLogger(__name__)

BASE_CSS = """\
div {
    display: flex;
}
div > * {
    flex-basis: 0;
    flex-grow: 1;
    padding: 3px 3px 7px 3px;
}
body {
    max-width: %(max_width)dpx;
    margin: 0 auto;
    float: none;
}
"""

SCROLL_SCRIPT = """\
    <script>
      if (window.location.hash) {
        var target = document.getElementById(window.location.hash.substring(1));
        if (target) {
          target.scrollIntoView(true);
        }
      }
    </script>
"""

FONT_FAMILIES = {
    FontFamily.SANS: "sans-serif",
    FontFamily.SERIF: "serif",
    FontFamily.MONO: "monospace",
}

SELECTOR_ELEMENTS = {
    ItemKind.TEXT: "span",
    ItemKind.INLINE: "span",
    ItemKind.BOX: "div",
    ItemKind.VBOX: "div",
    ItemKind.LINK: "a",
    ItemKind.BINARY: "img",
}


@dataclass(frozen=True)
class HTMLRendererConfig:
    """
    Attributes:
        title: Document title placed in ``<head>``.
        html_lang: Value of the ``lang`` attribute.
        page_max_width: Maximum body width in CSS pixels.
        indent: Indentation unit for nested elements.
    """

    title: str = "FML page"
    html_lang: str = "en"
    page_max_width: int = 850
    indent: str = "  "


def style_declarations(style: Style, base: Style) -> List[str]:
    """CSS declarations for the attributes of ``style`` that differ from ``base``."""
    declarations: List[str] = []
    if style.font_family is not base.font_family:
        declarations.append(f"font-family: {FONT_FAMILIES[style.font_family]};")
    if style.weight is not base.weight:
        declarations.append("font-weight: bold;" if style.weight is FontWeight.BOLD else "font-weight: normal;")

    if style.italic != base.italic:
        declarations.append("font-style: italic;" if style.italic else "font-style: normal;")
    lines = [name for decoration, name in ((Decoration.UNDERLINE, "underline"), (Decoration.STRIKE, "line-through"))
             if decoration in style.decorations]
    if (style.underline, style.strike) != (base.underline, base.strike):
        declarations.append(f"text-decoration: {' '.join(lines) or 'none'};")

    if style.foreground != base.foreground:
        declarations.append(f"color: #{style.foreground.to_hex()};")
    if style.background is not None and style.background != base.background:
        declarations.append(f"background-color: #{style.background.to_hex()};")
    if style.size != base.size:
        declarations.append(f"font-size: {style.size:g}pt;")
    if style.fill is not None and style.fill > 0 and style.fill != base.fill:
        declarations.append(f"flex-grow: {style.fill:g};")
    return declarations


class HTMLRenderer:
    """Renders a built document as one HTML page."""

    def __init__(self, config: Optional[HTMLRendererConfig] = None):
        self.config = config or HTMLRendererConfig()

    def render(self, document: Document) -> str:
        parts = [
            "<!DOCTYPE html>\n",
            f'<html lang="{escape(self.config.html_lang)}">\n',
            "  <head>\n",
            '    <meta charset="utf-8">\n',
            f"    <title>{escape(self.config.title)}</title>\n",
            "    <style>\n",
            BASE_CSS % {"max_width": self.config.page_max_width},
            self._style_block_css(document),
            "    </style>\n",
            "  </head>\n",
            "  <body>\n",
        ]
        parts.extend(self._render_tree(document.root, depth=2))
        parts.append(SCROLL_SCRIPT)
        parts.append("  </body>\n</html>\n")
        return "".join(parts)

    def render_to_file(self, document: Document, output_path: Union[str, Path]) -> Path:
        path = Path(output_path)
        try:
            path.write_text(self.render(document), encoding="utf-8")
        except OSError as exc:
            raise RenderingError(f"Cannot write HTML to {path}", details=str(exc)) from exc
        logger.info("HTML written to %s", path)
        return path

    # ------------------------------------------------------------------
    # CSS
    # ------------------------------------------------------------------

    def _style_block_css(self, document: Document) -> str:
        blank = Style()
        rules: List[str] = []
        for name, patches in document.styles.items():
            kind = SELECTOR_KINDS.get(name)
            if kind is not None:
                selector = SELECTOR_ELEMENTS[kind]
                base = default_style(kind)
            else:
                selector = f".{name}"
                base = blank
            declarations = style_declarations(apply_patches(base, patches), base)
            body = "".join(f"    {declaration}\n" for declaration in declarations)
            rules.append(f"{selector} {{\n{body}}}\n")
        return "".join(rules)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    @staticmethod
    def _style_attribute(node: DocumentNode, kind: ItemKind, extra: Tuple[str, ...] = ()) -> str:
        """``class`` and ``style`` attributes of a styled node."""
        attributes = ""
        if node.classes:
            attributes = f' class="{escape(" ".join(node.classes))}"'
        declarations = list(extra) + style_declarations(node.style, default_style(kind))
        if declarations:
            attributes += f' style="{escape(" ".join(declarations))}"'
        return attributes

    def _open_tag(self, node: DocumentNode) -> Tuple[str, str]:
        """Opening and closing markup of a container node."""
        if isinstance(node, VBox):
            attributes = self._style_attribute(node, ItemKind.VBOX, ("flex-direction: column;",))
            return f"<div{attributes}>", "</div>"
        if isinstance(node, Box):
            return f"<div{self._style_attribute(node, ItemKind.BOX)}>", "</div>"
        if isinstance(node, Inline):
            return f"<span{self._style_attribute(node, ItemKind.INLINE)}>", "</span>"
        raise TypeError(f"not a container node: {node!r}")

    def _leaf(self, node: DocumentNode) -> str:
        if isinstance(node, Text):
            return f"<span{self._style_attribute(node, ItemKind.TEXT)}>{escape(node.content, quote=False)}</span>"
        if isinstance(node, Link):
            return (
                f'<a href="{escape(node.url)}"{self._style_attribute(node, ItemKind.LINK)}>'
                f"{escape(node.display_text, quote=False)}</a>"
            )
        if isinstance(node, BinaryRef):
            alt = f' alt="{escape(node.alt_text)}"' if node.alt_text else ""
            return f'<img src="{escape(node.name)}"{alt}{self._style_attribute(node, ItemKind.BINARY)}>'
        if isinstance(node, Anchor):
            return f'<div id="{escape(node.name)}" style="display: none;"></div>'
        raise TypeError(f"not a document node: {node!r}")

    def _render_tree(self, root: DocumentNode, depth: int) -> List[str]:
        indent = self.config.indent
        parts: List[str] = []
        # entries are nodes to open, or closing markup strings
        stack: List[Tuple[Union[DocumentNode, str], int]] = [(root, depth)]
        while stack:
            entry, level = stack.pop()
            prefix = indent * level
            if isinstance(entry, str):
                parts.append(f"{prefix}{entry}\n")
                continue
            if isinstance(entry, (Box, VBox, Inline)):
                opening, closing = self._open_tag(entry)
                parts.append(f"{prefix}{opening}\n")
                stack.append((closing, level))
                stack.extend((child, level + 1) for child in reversed(entry.children))
            else:
                parts.append(f"{prefix}{self._leaf(entry)}\n")
        return parts


def to_html(document: Document, config: Optional[HTMLRendererConfig] = None) -> str:
    """Render ``document`` as an HTML page."""
    return HTMLRenderer(config).render(document)
