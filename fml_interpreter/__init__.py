"""
FML Interpreter - page markup parsing and layout library.

This package turns FML page markup (an s-expression-like page description)
into a positioned layout tree ready for painting:

- Scanning and parsing markup into a raw item tree
- Named style tables and style resolution with fixed precedence
- Building the typed document tree
- Two-phase width/height layout with fill ratios and inline flows
- Export to HTML and canonical markup

Main Components:
- Page: High level facade (parse once, lay out per viewport)
- Parser: Scanner and raw tree parser
- Styles: Style model, defaults, named style table, resolver
- Models: Document tree
- Engine: Layout engine, layout tree, text shapers
- Media: Binary objects delivered with a page
- Renderers: HTML and markup export
- Utils: Logging setup
"""

from .version import __version__

from .exceptions import (
    FmlInterpreterError,
    ParsingError,
    UnmatchedDelimiter,
    UnterminatedString,
    InvalidEscape,
    UnknownBuiltin,
    UnexpectedToken,
    BuildError,
    LayoutError,
    ShapingTimeout,
    RenderingError,
)
from .diagnostics import Diagnostic, DiagnosticCollector, DiagnosticKind
from .config import LayoutConfig
from .parser import parse
from .builder import DocumentBuilder, build, load
from .models import Anchor, BinaryRef, Box, Document, Inline, Link, Text, VBox
from .media import MISSING, BinaryObject, ObjectSet
from .engine import (
    FixedAdvanceShaper,
    LayoutEngine,
    LayoutTree,
    ReportLabShaper,
    TextShaper,
    layout,
)
from .renderers import to_html, to_markup
from .api import Page, render_page

__all__ = [
    "__version__",
    # Exceptions
    "FmlInterpreterError",
    "ParsingError",
    "UnmatchedDelimiter",
    "UnterminatedString",
    "InvalidEscape",
    "UnknownBuiltin",
    "UnexpectedToken",
    "BuildError",
    "LayoutError",
    "ShapingTimeout",
    "RenderingError",
    # Diagnostics and configuration
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticKind",
    "LayoutConfig",
    # Pipeline
    "parse",
    "DocumentBuilder",
    "build",
    "load",
    "Anchor",
    "BinaryRef",
    "Box",
    "Document",
    "Inline",
    "Link",
    "Text",
    "VBox",
    "MISSING",
    "BinaryObject",
    "ObjectSet",
    "FixedAdvanceShaper",
    "LayoutEngine",
    "LayoutTree",
    "ReportLabShaper",
    "TextShaper",
    "layout",
    "to_html",
    "to_markup",
    # API
    "Page",
    "render_page",
]
