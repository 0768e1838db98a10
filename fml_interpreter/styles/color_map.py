"""
Color map for FML style arguments.

Converts the argument of ``(fg "...")`` / ``(bg "...")`` into a :class:`Color`.
Accepted forms are ``RRGGBB``, ``#RRGGBB``, the short ``RGB`` form and a small
set of color names.
"""

from typing import Dict, Optional, Tuple
import logging
import re

from .style_model import Color

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


class ColorMap:
    """
    Maps color arguments to RGB values.
    """

    NAMED_COLORS: Dict[str, Tuple[int, int, int]] = {
        'black': (0, 0, 0),
        'white': (255, 255, 255),
        'red': (255, 0, 0),
        'green': (0, 128, 0),
        'lime': (0, 255, 0),
        'blue': (0, 0, 255),
        'navy': (0, 0, 128),
        'yellow': (255, 255, 0),
        'cyan': (0, 255, 255),
        'magenta': (255, 0, 255),
        'gray': (128, 128, 128),
        'grey': (128, 128, 128),
        'silver': (192, 192, 192),
        'orange': (255, 165, 0),
        'purple': (128, 0, 128),
        'brown': (165, 42, 42),
        'pink': (255, 192, 203),
        'cornsilk': (255, 248, 220),
    }

    def __init__(self, extra_colors: Optional[Dict[str, Tuple[int, int, int]]] = None):
        self.color_mappings = dict(self.NAMED_COLORS)
        if extra_colors:
            self.color_mappings.update({name.lower(): rgb for name, rgb in extra_colors.items()})

    def parse(self, value: str) -> Color:
        """
        Parse a color argument.

        Args:
            value: Argument text

        Returns:
            Parsed color

        Raises:
            ValueError: if the argument is not a recognised color
        """
        text = value.strip()
        named = self.color_mappings.get(text.lower())
        if named is not None:
            return Color(*named)

        rgb = self._hex_to_rgb(text)
        if rgb is None:
            raise ValueError(f"expected a color as RRGGBB, got {value!r}")
        return Color(*rgb)

    def _hex_to_rgb(self, hex_color: str) -> Optional[Tuple[int, int, int]]:
        if not _HEX_RE.match(hex_color):
            return None
        hex_color = hex_color.lstrip('#')
        if len(hex_color) == 3:
            hex_color = ''.join(c * 2 for c in hex_color)
        return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))


DEFAULT_COLOR_MAP = ColorMap()


def parse_color(value: str) -> Color:
    return DEFAULT_COLOR_MAP.parse(value)
