"""
Text shaping collaborators.

The layout engine never measures text itself: it asks a shaper for the width
of a word or a candidate line at a resolved style. Any object with a matching
``measure`` method works; two implementations ship here:

- :class:`ReportLabShaper` measures with ReportLab's base-14 font metrics.
- :class:`FixedAdvanceShaper` gives every character the same advance. It is
  deterministic and font-free, which suits tests and headless previews.

A shaper backed by a remote or asynchronous service should block until it has
a measurement and raise :class:`~fml_interpreter.exceptions.ShapingTimeout`
when it gives up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol, Tuple, runtime_checkable

from reportlab.pdfbase import pdfmetrics

from ..styles.style_model import Style
from .geometry import points_to_pixels
from .utils.font_utils import font_for_style


@dataclass(frozen=True, slots=True)
class TextMeasure:
    """Measured run, in pixels."""
    width: float
    line_height: float


@runtime_checkable
class TextShaper(Protocol):
    def measure(self, text: str, style: Style, dpi: float) -> TextMeasure:
        """Width of ``text`` on one line and the line height, in pixels."""
        ...


class ReportLabShaper:
    """
    Shaper backed by ReportLab font metrics.

    Font sizes in styles are points; results are converted to pixels at the
    requested DPI.
    """

    def __init__(self, line_spacing: float = 1.2):
        """
        Args:
            line_spacing: Line height as a multiple of the font size
        """
        self.line_spacing = line_spacing
        self._width_cache: Dict[Tuple[str, str, float], float] = {}

    def _string_width_points(self, text: str, font_name: str, font_size: float) -> float:
        key = (text, font_name, font_size)
        width = self._width_cache.get(key)
        if width is None:
            width = pdfmetrics.stringWidth(text, font_name, font_size)
            self._width_cache[key] = width
        return width

    def measure(self, text: str, style: Style, dpi: float) -> TextMeasure:
        font_name = font_for_style(style)
        width_pt = self._string_width_points(text, font_name, style.size) if text else 0.0
        return TextMeasure(
            width=points_to_pixels(width_pt, dpi),
            line_height=self.get_line_height(style, dpi),
        )

    def get_line_height(self, style: Style, dpi: float) -> float:
        return points_to_pixels(style.size * self.line_spacing, dpi)


class FixedAdvanceShaper:
    """
    Every character advances by ``advance`` pixels at size 12pt, scaled
    linearly with the style size. DPI is ignored.
    """

    def __init__(self, advance: float = 10.0, line_height: float = 20.0):
        self.advance = advance
        self.line_height = line_height

    def measure(self, text: str, style: Style, dpi: float) -> TextMeasure:
        factor = style.size / 12.0
        return TextMeasure(
            width=len(text) * self.advance * factor,
            line_height=self.line_height * factor,
        )
