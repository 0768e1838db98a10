"""
Simple high-level API for the FML interpreter.

Main entry point for users: parse a page once, lay it out as often as the
viewport changes.

Example:
    >>> from fml_interpreter import Page
    >>>
    >>> page = Page.from_markup('(box ({(fill "1")} "left") "right")')
    >>> tree = page.layout(800, 600)
    >>> tree.anchors, tree.links
    >>>
    >>> # Export
    >>> html = page.to_html()
    >>> markup = page.to_markup()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Union

from .builder import build
from .config import LayoutConfig
from .diagnostics import Diagnostic
from .engine.layout_engine import LayoutEngine
from .engine.layout_tree import LayoutTree
from .engine.text_metrics import TextShaper
from .media.object_set import ObjectSet, Payload
from .models.nodes import Document
from .parser.markup_parser import parse
from .renderers.html_renderer import HTMLRendererConfig, to_html
from .renderers.markup_writer import to_markup

logger = logging.getLogger(__name__)

__all__ = [
    "Page",
    "render_page",
]


class Page:
    """
    One parsed and built FML page plus the binary objects that came with it.

    The document is immutable once built; every :meth:`layout` call produces
    a fresh layout tree, so one page may be laid out for several viewports,
    also concurrently.
    """

    def __init__(self, document: Document, objects: Union[ObjectSet, Mapping[str, Payload], None] = None):
        self.document = document
        self.objects = ObjectSet.coerce(objects)

    @classmethod
    def from_markup(cls, text: str, objects: Union[ObjectSet, Mapping[str, Payload], None] = None) -> "Page":
        """
        Parse and build markup text.

        Raises:
            ParsingError: Malformed markup
            BuildError: An item has arguments of the wrong shape
        """
        document = build(parse(text))
        logger.debug("Page built: %d diagnostics", len(document.diagnostics))
        return cls(document, objects)

    @classmethod
    def open(cls, file_path: Union[str, Path],
             objects: Union[ObjectSet, Mapping[str, Payload], None] = None) -> "Page":
        """Read a page from a UTF-8 markup file."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Page not found: {path}")
        return cls.from_markup(path.read_text(encoding="utf-8"), objects)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self.document.diagnostics)

    def referenced_names(self) -> List[str]:
        """Binary object names the transport needs to fetch for this page."""
        return self.document.referenced_names()

    def missing_objects(self) -> List[str]:
        return self.objects.missing_from(self.referenced_names())

    def layout(self, width: float, height: float, dpi: Optional[float] = None,
               shaper: Optional[TextShaper] = None, config: Optional[LayoutConfig] = None) -> LayoutTree:
        """
        Lay out the page for a viewport.

        Args:
            width: Viewport width in pixels
            height: Viewport height in pixels
            dpi: Resolution (``config.dpi`` when omitted)
            shaper: Text shaper (ReportLab metrics when omitted)
            config: Layout tunables

        Returns:
            LayoutTree with anchors, links and warnings
        """
        engine = LayoutEngine(shaper, config, self.objects)
        return engine.layout(self.document, width, height, dpi)

    def to_html(self, config: Optional[HTMLRendererConfig] = None) -> str:
        return to_html(self.document, config)

    def to_markup(self) -> str:
        return to_markup(self.document)


def render_page(text: str, width: float, height: float, dpi: Optional[float] = None,
                shaper: Optional[TextShaper] = None,
                objects: Union[ObjectSet, Mapping[str, Payload], None] = None,
                config: Optional[LayoutConfig] = None) -> LayoutTree:
    """
    Parse, build and lay out markup in one call.

    Examples:
        >>> tree = render_page('("hello")', 640, 480)
    """
    return Page.from_markup(text, objects).layout(width, height, dpi, shaper, config)
