"""Translation of raw style modifiers into style patches."""

from __future__ import annotations

import math
from typing import Callable, Dict, Optional

from ..diagnostics import DiagnosticCollector, DiagnosticKind
from ..parser.markup_parser import StyleModifier
from .color_map import parse_color
from .style_model import Decoration, FontFamily, FontWeight, StyleAttribute, StylePatch

BARE_MODIFIERS: Dict[str, StylePatch] = {
    "serif": StylePatch(StyleAttribute.FONT_FAMILY, FontFamily.SERIF),
    "sans": StylePatch(StyleAttribute.FONT_FAMILY, FontFamily.SANS),
    "mono": StylePatch(StyleAttribute.FONT_FAMILY, FontFamily.MONO),
    "bold": StylePatch(StyleAttribute.WEIGHT, FontWeight.BOLD),
    "normal": StylePatch(StyleAttribute.WEIGHT, FontWeight.NORMAL),
    "italic": StylePatch(StyleAttribute.DECORATION, Decoration.ITALIC),
    "underline": StylePatch(StyleAttribute.DECORATION, Decoration.UNDERLINE),
    "strike": StylePatch(StyleAttribute.DECORATION, Decoration.STRIKE),
    "plain": StylePatch(StyleAttribute.DECORATION, None),
}


def _number(text: str) -> float:
    value = float(text.strip())
    if not math.isfinite(value):
        raise ValueError(f"expected a finite number, got {text!r}")
    return value


def _positive(text: str) -> float:
    value = _number(text)
    if value <= 0:
        raise ValueError(f"expected a positive number, got {text!r}")
    return value


# fill keeps negative values; they are rejected per node during layout
ARGUMENT_MODIFIERS: Dict[str, tuple[StyleAttribute, Callable[[str], object]]] = {
    "fg": (StyleAttribute.FOREGROUND, parse_color),
    "bg": (StyleAttribute.BACKGROUND, parse_color),
    "size": (StyleAttribute.SIZE, _positive),
    "fill": (StyleAttribute.FILL, _number),
    "scale": (StyleAttribute.SCALE, _positive),
}


def is_style_reference(modifier: StyleModifier) -> bool:
    """Bare identifiers that are not builtin modifiers name a style."""
    return not modifier.has_argument and modifier.name not in BARE_MODIFIERS


def to_patch(modifier: StyleModifier, diagnostics: DiagnosticCollector) -> Optional[StylePatch]:
    """
    Convert a non-reference modifier into a patch.

    Invalid arguments and unknown modifiers are reported and yield ``None``.
    """
    if not modifier.has_argument:
        return BARE_MODIFIERS.get(modifier.name)

    entry = ARGUMENT_MODIFIERS.get(modifier.name)
    if entry is None:
        diagnostics.report(
            DiagnosticKind.UNKNOWN_MODIFIER,
            f"unknown style modifier ({modifier.name} \"{modifier.argument}\")",
            modifier.line, modifier.column,
        )
        return None

    attribute, convert = entry
    try:
        value = convert(modifier.argument)
    except ValueError as exc:
        diagnostics.report(
            DiagnosticKind.INVALID_STYLE_ARGUMENT,
            f"bad argument to {modifier.name}: {exc}",
            modifier.line, modifier.column,
        )
        return None
    return StylePatch(attribute, value)
