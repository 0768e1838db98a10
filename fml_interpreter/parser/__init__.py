"""
Parser module for FML markup.

Contains the scanner and the raw item tree parser.
"""

from .scanner import BUILTINS, Scanner, Token, TokenKind
from .markup_parser import (
    MarkupParser,
    RawList,
    RawPage,
    RawStyleList,
    RawText,
    StyleModifier,
    StyleRule,
    iter_lists,
    parse,
)

__all__ = [
    "BUILTINS",
    "Scanner",
    "Token",
    "TokenKind",
    "MarkupParser",
    "RawList",
    "RawPage",
    "RawStyleList",
    "RawText",
    "StyleModifier",
    "StyleRule",
    "iter_lists",
    "parse",
]
