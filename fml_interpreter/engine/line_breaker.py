"""
Greedy line breaking.

Two entry points:

- :func:`break_text_into_lines` wraps a single-style text run by measuring
  candidate lines with the shaper.
- :func:`flow_items` wraps a mixed sequence of pre-measured items (words of
  differently styled runs, images, nested blocks, anchor marks) for inline
  flows.

A word wider than the line is placed on a line of its own and overflows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from ..styles.style_model import Style
from .layout_tree import FragmentKind
from .text_metrics import TextMeasure

MeasureFn = Callable[[str, Style], TextMeasure]


@dataclass(frozen=True, slots=True)
class WrappedLine:
    text: str
    width: float


def break_text_into_lines(text: str, style: Style, max_width: float, measure: MeasureFn) -> List[WrappedLine]:
    """
    Break text into lines no wider than ``max_width``.

    Args:
        text: Text to wrap; runs of whitespace collapse to one space
        style: Resolved style of the run
        max_width: Available width in pixels
        measure: Shaper callback

    Returns:
        Wrapped lines; at least one (possibly empty) line
    """
    words = text.split()
    if not words:
        return [WrappedLine("", 0.0)]

    lines: List[WrappedLine] = []
    current = ""
    current_width = 0.0

    for word in words:
        candidate = f"{current} {word}" if current else word
        candidate_width = measure(candidate, style).width

        if candidate_width <= max_width:
            current, current_width = candidate, candidate_width
        elif current:
            lines.append(WrappedLine(current, current_width))
            current, current_width = word, measure(word, style).width
        else:
            # word is wider than the line on its own
            lines.append(WrappedLine(word, candidate_width))
            current, current_width = "", 0.0

    if current:
        lines.append(WrappedLine(current, current_width))

    return lines


def widest_word(text: str, style: Style, measure: MeasureFn) -> float:
    return max((measure(word, style).width for word in text.split()), default=0.0)


@dataclass(slots=True)
class FlowItem:
    """One unbreakable piece of an inline flow."""

    kind: FragmentKind
    width: float
    height: float
    text: str = ""
    style: Optional[Style] = None
    space_before: float = 0.0
    owner: int = 0
    payload: Any = None


@dataclass(slots=True)
class FlowLine:
    items: List[FlowItem] = field(default_factory=list)
    offsets: List[float] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0


def run_to_items(text: str, style: Style, measure: MeasureFn, owner: int,
                 space_pending: bool) -> tuple[List[FlowItem], bool]:
    """
    Split a styled run into word items.

    Args:
        text: Run text
        style: Run style
        measure: Shaper callback
        owner: Owner index stored on each item
        space_pending: Whether the previous run ended in whitespace

    Returns:
        Items and whether this run ends in whitespace
    """
    words = text.split()
    if not words:
        return [], space_pending or bool(text)

    metrics = measure(" ", style)
    space = metrics.width
    items: List[FlowItem] = []
    leading = space_pending or text[0].isspace()
    for index, word in enumerate(words):
        word_metrics = measure(word, style)
        items.append(FlowItem(
            kind=FragmentKind.WORD,
            width=word_metrics.width,
            height=word_metrics.line_height,
            text=word,
            style=style,
            space_before=space if (index > 0 or leading) else 0.0,
            owner=owner,
        ))
    return items, text[-1].isspace()


def flow_items(items: List[FlowItem], max_width: float) -> List[FlowLine]:
    """
    Place items left to right, starting a new line when the next item would
    cross ``max_width``. Zero-width items never cause a break. The gap before
    an item is dropped at the start of a line.
    """
    lines: List[FlowLine] = []
    current = FlowLine()

    for item in items:
        gap = item.space_before if current.items else 0.0
        if current.items and item.width > 0 and current.width + gap + item.width > max_width:
            lines.append(current)
            current = FlowLine()
            gap = 0.0
        x = current.width + gap
        current.items.append(item)
        current.offsets.append(x)
        current.width = x + item.width
        current.height = max(current.height, item.height)

    if current.items:
        lines.append(current)
    return lines
