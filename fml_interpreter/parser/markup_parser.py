"""
Markup parser.

Builds the raw item tree from a token stream. The raw tree is transient: it
only lives between :func:`parse` and the document builder.

Grammar summary::

    page       := style-block? item*
    style-block:= '{' rule* '}'
    rule       := '(' name modifier* ')' | name '(' modifier* ')'
    item       := '(' head? (style-list | string | item)* ')' | string
    style-list := '{' modifier* '}'
    modifier   := identifier | '(' identifier string ')'

Nested lists are tracked with an explicit stack, so deeply nested pages do not
consume interpreter stack frames.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from ..exceptions import UnexpectedToken, UnknownBuiltin, UnmatchedDelimiter
from .scanner import BUILTINS, Scanner, Token, TokenKind

logger = logging.getLogger(__name__)

# builtins whose arguments are strings only
LEAF_BUILTINS = frozenset({"text", "&", "#", "^"})
CONTAINER_BUILTINS = frozenset({"box", "vbox", "inline"})
# builtins whose strings are separate positional arguments
ARGUMENT_BUILTINS = frozenset({"&", "#", "^"})

_CLOSERS = (TokenKind.RIGHT_PAREN, TokenKind.RIGHT_BRACE)


@dataclass(frozen=True, slots=True)
class StyleModifier:
    """One entry of a ``{...}`` list: ``bold``, ``footnote`` or ``(fg "ff0000")``."""

    name: str
    argument: Optional[str] = None
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    @property
    def has_argument(self) -> bool:
        return self.argument is not None


@dataclass(frozen=True, slots=True)
class RawStyleList:
    modifiers: Tuple[StyleModifier, ...]
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True, slots=True)
class RawText:
    value: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(slots=True)
class RawList:
    """A parenthesized item. ``name`` is ``None`` for an unnamed text list."""

    name: Optional[str]
    children: List["RawItem"] = field(default_factory=list)
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    @property
    def is_text(self) -> bool:
        return self.name is None or self.name == "text"

    @property
    def has_style_list(self) -> bool:
        return any(isinstance(child, RawStyleList) for child in self.children)

    @property
    def modifiers(self) -> Tuple[StyleModifier, ...]:
        collected: List[StyleModifier] = []
        for child in self.children:
            if isinstance(child, RawStyleList):
                collected.extend(child.modifiers)
        return tuple(collected)

    @property
    def arguments(self) -> List[Union["RawList", RawText]]:
        return [child for child in self.children if not isinstance(child, RawStyleList)]


RawItem = Union[RawList, RawText, RawStyleList]


@dataclass(frozen=True, slots=True)
class StyleRule:
    name: str
    modifiers: Tuple[StyleModifier, ...]
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(slots=True)
class RawPage:
    style_rules: List[StyleRule] = field(default_factory=list)
    items: List[Union[RawList, RawText]] = field(default_factory=list)


def _closing_for(token: Token) -> str:
    return ')' if token.kind is TokenKind.LEFT_PAREN else '}'


def _unclosed(opener: Token) -> UnmatchedDelimiter:
    return UnmatchedDelimiter(
        f"unclosed '{opener.lexeme}'", opener.line, opener.column,
        details=f"expected '{_closing_for(opener)}' before end of input",
    )


class MarkupParser:
    """Parser over a pre-scanned token list."""

    def __init__(self, source: str):
        self.tokens: List[Token] = Scanner(source).tokenize()
        self.pos = 0

    # -- token helpers -------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _next(self) -> Token:
        token = self._peek()
        if token.kind is not TokenKind.END:
            self.pos += 1
        return token

    def _expect(self, kind: TokenKind, message: str, opener: Token) -> Token:
        token = self._next()
        if token.kind is kind:
            return token
        if token.kind is TokenKind.END:
            raise _unclosed(opener)
        if token.kind in _CLOSERS:
            raise UnmatchedDelimiter(
                f"unexpected '{token.lexeme}'", token.line, token.column, details=message
            )
        raise UnexpectedToken(message, token.line, token.column, details=f"got {token.describe()}")

    # -- style lists ---------------------------------------------------

    def _parse_modifiers(self, closer: TokenKind, opener: Token) -> Tuple[StyleModifier, ...]:
        modifiers: List[StyleModifier] = []
        while True:
            token = self._next()
            if token.kind is closer:
                return tuple(modifiers)
            if token.kind is TokenKind.END:
                raise _unclosed(opener)
            if token.kind is TokenKind.IDENTIFIER:
                modifiers.append(StyleModifier(token.lexeme, None, token.line, token.column))
            elif token.kind is TokenKind.LEFT_PAREN:
                name = self._expect(TokenKind.IDENTIFIER, "expected a built-in style name", token)
                argument = self._expect(
                    TokenKind.STRING, f"expected an argument to the built-in style '{name.lexeme}'", token
                )
                self._expect(TokenKind.RIGHT_PAREN, "styles take exactly one argument", token)
                modifiers.append(StyleModifier(name.lexeme, argument.lexeme, name.line, name.column))
            elif token.kind in _CLOSERS:
                raise UnmatchedDelimiter(
                    f"unexpected '{token.lexeme}'", token.line, token.column,
                    details=f"'{opener.lexeme}' opened at line {opener.line} is still open",
                )
            else:
                raise UnexpectedToken(
                    "expected a style modifier", token.line, token.column,
                    details=f"got {token.describe()}",
                )

    def _parse_style_block(self) -> List[StyleRule]:
        opener = self._next()
        rules: List[StyleRule] = []
        while True:
            token = self._peek()
            if token.kind is TokenKind.RIGHT_BRACE:
                self._next()
                return rules
            if token.kind is TokenKind.END:
                raise _unclosed(opener)

            if token.kind is TokenKind.LEFT_PAREN:
                # (name modifier ...)
                self._next()
                name = self._expect(
                    TokenKind.IDENTIFIER,
                    "style rules start with a style name or a built-in item name",
                    token,
                )
                modifiers = self._parse_modifiers(TokenKind.RIGHT_PAREN, token)
                rules.append(StyleRule(name.lexeme, modifiers, name.line, name.column))
            elif token.kind is TokenKind.IDENTIFIER:
                # name (modifier ...)  or  name (with-arg "value")
                name = self._next()
                group = self._expect(
                    TokenKind.LEFT_PAREN, f"expected the modifiers of style '{name.lexeme}'", opener
                )
                if (self._peek().kind is TokenKind.IDENTIFIER
                        and self._peek(1).kind is TokenKind.STRING
                        and self._peek(2).kind is TokenKind.RIGHT_PAREN):
                    modifier_name, argument, _ = self._next(), self._next(), self._next()
                    modifiers = (StyleModifier(
                        modifier_name.lexeme, argument.lexeme, modifier_name.line, modifier_name.column
                    ),)
                else:
                    modifiers = self._parse_modifiers(TokenKind.RIGHT_PAREN, group)
                rules.append(StyleRule(name.lexeme, modifiers, name.line, name.column))
            else:
                self._next()
                if token.kind is TokenKind.RIGHT_PAREN:
                    raise UnmatchedDelimiter("unexpected ')'", token.line, token.column)
                raise UnexpectedToken(
                    "expected a style rule", token.line, token.column,
                    details=f"got {token.describe()}",
                )

    # -- items ---------------------------------------------------------

    @staticmethod
    def _is_plain_text_list(item) -> bool:
        return isinstance(item, RawList) and item.name is None and not item.has_style_list

    @staticmethod
    def _text_of(item: RawList) -> str:
        return "".join(child.value for child in item.children if isinstance(child, RawText))

    @classmethod
    def _append_text(cls, children: List, token: Token) -> None:
        """Append a bare string, folding it into a neighbouring plain text run."""
        previous = children[-1] if children else None
        if isinstance(previous, RawText):
            children[-1] = RawText(previous.value + token.lexeme, previous.line, previous.column)
        elif cls._is_plain_text_list(previous):
            previous.children[:] = [RawText(cls._text_of(previous) + token.lexeme, previous.line, previous.column)]
        else:
            children.append(RawText(token.lexeme, token.line, token.column))

    @classmethod
    def _attach(cls, children: List, item: RawList) -> None:
        """Append a finished list, folding runs of plain unnamed text lists and bare strings."""
        if cls._is_plain_text_list(item) and children:
            previous = children[-1]
            if isinstance(previous, RawText):
                children[-1] = RawText(previous.value + cls._text_of(item), previous.line, previous.column)
                return
            if cls._is_plain_text_list(previous):
                merged = cls._text_of(previous) + cls._text_of(item)
                previous.children[:] = [RawText(merged, previous.line, previous.column)]
                return
        children.append(item)

    def _open_list(self, opener: Token, parent: Optional[RawList]) -> RawList:
        if parent is not None and parent.is_text:
            raise UnexpectedToken(
                "text items cannot contain nested items", opener.line, opener.column
            )
        if parent is not None and parent.name in LEAF_BUILTINS:
            raise UnexpectedToken(
                f"'{parent.name}' items cannot contain nested items", opener.line, opener.column
            )
        head = self._peek()
        name: Optional[str] = None
        if head.kind is TokenKind.IDENTIFIER:
            if head.lexeme not in BUILTINS:
                raise UnknownBuiltin(f"unknown builtin '{head.lexeme}'", head.line, head.column)
            name = self._next().lexeme
        return RawList(name, [], opener.line, opener.column)

    def parse(self) -> RawPage:
        page = RawPage()
        style_block_seen = False
        stack: List[Tuple[RawList, Token]] = []

        while True:
            token = self._peek()
            current = stack[-1][0] if stack else None
            target = current.children if current is not None else page.items

            if token.kind is TokenKind.END:
                if stack:
                    raise _unclosed(stack[-1][1])
                break

            if token.kind is TokenKind.LEFT_PAREN:
                self._next()
                stack.append((self._open_list(token, current), token))
            elif token.kind is TokenKind.RIGHT_PAREN:
                self._next()
                if not stack:
                    raise UnmatchedDelimiter("unmatched ')'", token.line, token.column)
                finished, _ = stack.pop()
                parent_children = stack[-1][0].children if stack else page.items
                self._attach(parent_children, finished)
            elif token.kind is TokenKind.LEFT_BRACE:
                if current is None:
                    if style_block_seen or page.items:
                        raise UnexpectedToken(
                            "the style block must come before any page item and appear once",
                            token.line, token.column,
                        )
                    style_block_seen = True
                    page.style_rules = self._parse_style_block()
                else:
                    self._next()
                    modifiers = self._parse_modifiers(TokenKind.RIGHT_BRACE, token)
                    current.children.append(RawStyleList(modifiers, token.line, token.column))
            elif token.kind is TokenKind.RIGHT_BRACE:
                self._next()
                raise UnmatchedDelimiter("unmatched '}'", token.line, token.column)
            elif token.kind is TokenKind.STRING:
                self._next()
                if current is not None and current.name in ARGUMENT_BUILTINS:
                    target.append(RawText(token.lexeme, token.line, token.column))
                else:
                    self._append_text(target, token)
            else:
                self._next()
                raise UnexpectedToken(
                    f"unexpected symbol '{token.lexeme}'", token.line, token.column,
                    details="only the first element of a list may name a builtin",
                )

        logger.debug("Parsed %d style rules and %d top-level items", len(page.style_rules), len(page.items))
        return page


def parse(source: str) -> RawPage:
    """Parse markup text into a :class:`RawPage`. Raises :class:`ParsingError`."""
    return MarkupParser(source).parse()


def iter_lists(items: Sequence[RawItem]):
    """Pre-order walk over every :class:`RawList` below ``items``."""
    stack = [item for item in reversed(items) if isinstance(item, RawList)]
    while stack:
        item = stack.pop()
        yield item
        stack.extend(child for child in reversed(item.children) if isinstance(child, RawList))
