"""Geometry primitives and helpers for layout calculations."""

from __future__ import annotations

from dataclasses import dataclass


POINTS_PER_INCH = 72.0


@dataclass(slots=True)
class Size:
    width: float
    height: float


@dataclass(slots=True)
class Rect:
    """Axis-aligned rectangle in page pixels; y grows downward."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        """Ensure non-negative dimensions."""
        if self.width < 0:
            self.width = abs(self.width)
        if self.height < 0:
            self.height = abs(self.height)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom

    def union(self, other: "Rect") -> "Rect":
        """Calculate the bounding rectangle that contains both rectangles.

        Args:
            other: Another Rect object

        Returns:
            New Rect that contains both rectangles
        """
        left = min(self.left, other.left)
        right = max(self.right, other.right)
        top = min(self.top, other.top)
        bottom = max(self.bottom, other.bottom)
        return Rect(x=left, y=top, width=right - left, height=bottom - top)

    def translated(self, dx: float, dy: float) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)


def points_to_pixels(value: float | None, dpi: float = 96.0) -> float:
    if value is None:
        return 0.0
    return float(value) * dpi / POINTS_PER_INCH


def pixels_to_points(value: float | None, dpi: float = 96.0) -> float:
    if value is None:
        return 0.0
    return float(value) * POINTS_PER_INCH / dpi
