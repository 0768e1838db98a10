"""Layout configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutConfig:
    """Tunables handed explicitly to every layout run."""
    dpi: float = 96.0
    line_spacing: float = 1.2
    min_placeholder_width: float = 1.0  # pixels
    placeholder_height: float = 1.0  # pixels

    def validate(self) -> "LayoutConfig":
        for name in ("dpi", "line_spacing", "min_placeholder_width", "placeholder_height"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"LayoutConfig.{name} must be positive, got {value!r}")
        return self
