"""
Layout engine for FML documents.

Turns a built document into a positioned layout tree using a text shaper.
"""

from .geometry import Rect, Size, pixels_to_points, points_to_pixels
from .layout_engine import LayoutEngine, allocate_row, layout
from .layout_tree import Fragment, FragmentKind, LayoutLine, LayoutNode, LayoutTree, LinkTarget, NodeKind
from .layout_validator import LayoutValidator
from .text_metrics import FixedAdvanceShaper, ReportLabShaper, TextMeasure, TextShaper

__all__ = [
    "Rect",
    "Size",
    "pixels_to_points",
    "points_to_pixels",
    "LayoutEngine",
    "allocate_row",
    "layout",
    "Fragment",
    "FragmentKind",
    "LayoutLine",
    "LayoutNode",
    "LayoutTree",
    "LinkTarget",
    "NodeKind",
    "LayoutValidator",
    "FixedAdvanceShaper",
    "ReportLabShaper",
    "TextMeasure",
    "TextShaper",
]
