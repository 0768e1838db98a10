"""
Styles module for FML pages.

Contains the style value model, builtin defaults, the per-document named
style table and the resolver that merges them.
"""

from .style_model import (
    Color,
    Decoration,
    FontFamily,
    FontWeight,
    Style,
    StyleAttribute,
    StylePatch,
    apply_patches,
)
from .color_map import ColorMap, parse_color
from .defaults import ItemKind, default_style
from .style_table import NamedStyleTable
from .style_resolver import StyleResolver

__all__ = [
    "Color",
    "Decoration",
    "FontFamily",
    "FontWeight",
    "Style",
    "StyleAttribute",
    "StylePatch",
    "apply_patches",
    "ColorMap",
    "parse_color",
    "ItemKind",
    "default_style",
    "NamedStyleTable",
    "StyleResolver",
]
