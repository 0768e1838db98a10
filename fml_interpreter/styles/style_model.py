"""
Resolved style values.

A :class:`Style` is an immutable struct. Styling is computed by applying an
ordered list of :class:`StylePatch` objects to a starting struct; a later
patch for the same attribute overrides an earlier one, except decorations,
which accumulate until a patch with no decoration clears them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional, Tuple


class FontFamily(Enum):
    SERIF = "serif"
    SANS = "sans"
    MONO = "mono"


class FontWeight(Enum):
    NORMAL = "normal"
    BOLD = "bold"


class Decoration(Enum):
    UNDERLINE = "underline"
    STRIKE = "strike"
    ITALIC = "italic"


@dataclass(frozen=True, slots=True)
class Color:
    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"color channel out of range: {channel}")

    def to_hex(self) -> str:
        return f"{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_unit_rgb(self) -> Tuple[float, float, float]:
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0)


class StyleAttribute(Enum):
    FONT_FAMILY = "font_family"
    WEIGHT = "weight"
    DECORATION = "decorations"
    FOREGROUND = "foreground"
    BACKGROUND = "background"
    SIZE = "size"
    FILL = "fill"
    SCALE = "scale"


@dataclass(frozen=True, slots=True)
class Style:
    font_family: FontFamily = FontFamily.SANS
    weight: FontWeight = FontWeight.NORMAL
    decorations: FrozenSet[Decoration] = field(default_factory=frozenset)
    foreground: Color = Color(0x30, 0x30, 0x30)
    background: Optional[Color] = None
    size: float = 12.0  # points
    fill: Optional[float] = None
    scale: Optional[float] = None

    @property
    def bold(self) -> bool:
        return self.weight is FontWeight.BOLD

    @property
    def italic(self) -> bool:
        return Decoration.ITALIC in self.decorations

    @property
    def underline(self) -> bool:
        return Decoration.UNDERLINE in self.decorations

    @property
    def strike(self) -> bool:
        return Decoration.STRIKE in self.decorations

    @property
    def fill_ratio(self) -> float:
        """Fill weight with absent meaning 0 (content sized)."""
        return self.fill if self.fill is not None else 0.0

    def sorted_decorations(self) -> Tuple[Decoration, ...]:
        order = list(Decoration)
        return tuple(sorted(self.decorations, key=order.index))


@dataclass(frozen=True, slots=True)
class StylePatch:
    attribute: StyleAttribute
    value: Any

    def apply(self, style: Style) -> Style:
        if self.attribute is StyleAttribute.DECORATION:
            # a None decoration clears the set
            if self.value is None:
                return replace(style, decorations=frozenset())
            return replace(style, decorations=style.decorations | {self.value})
        return replace(style, **{self.attribute.value: self.value})


def apply_patches(style: Style, patches: Iterable[StylePatch]) -> Style:
    for patch in patches:
        style = patch.apply(style)
    return style
