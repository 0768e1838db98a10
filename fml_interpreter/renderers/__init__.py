"""
Renderers module for FML documents.

Contains the HTML renderer and the canonical markup writer.
"""

from .html_renderer import HTMLRenderer, HTMLRendererConfig, style_declarations, to_html
from .markup_writer import MarkupWriter, style_modifiers, to_markup

__all__ = [
    "HTMLRenderer",
    "HTMLRendererConfig",
    "style_declarations",
    "to_html",
    "MarkupWriter",
    "style_modifiers",
    "to_markup",
]
