"""
Scanner for FML markup.

Turns markup text into a flat list of tokens with 1-based line/column
positions. Comments (``;`` to end of line) and whitespace are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from ..exceptions import InvalidEscape, UnterminatedString


class TokenKind(Enum):
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    STRING = "string"
    IDENTIFIER = "identifier"
    END = "end of input"


BUILTINS = frozenset({"box", "vbox", "inline", "text", "&", "#", "^"})

ESCAPES = {
    '"': '"',
    '\\': '\\',
    'n': '\n',
    't': '\t',
}

_DELIMITERS = {
    '(': TokenKind.LEFT_PAREN,
    ')': TokenKind.RIGHT_PAREN,
    '{': TokenKind.LEFT_BRACE,
    '}': TokenKind.RIGHT_BRACE,
}

_IDENTIFIER_STOP = set('(){}";')


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    lexeme: str
    line: int
    column: int

    @property
    def is_builtin(self) -> bool:
        return self.kind is TokenKind.IDENTIFIER and self.lexeme in BUILTINS

    def describe(self) -> str:
        if self.kind is TokenKind.STRING:
            return f'"{self.lexeme}"'
        if self.kind is TokenKind.END:
            return self.kind.value
        return self.lexeme


class Scanner:
    """Single-pass tokenizer over markup text."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def _advance(self) -> str:
        char = self.source[self.pos]
        self.pos += 1
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _peek(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ''

    def _skip_trivia(self) -> None:
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char.isspace():
                self._advance()
            elif char == ';':
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
            else:
                break

    def _scan_string(self, line: int, column: int) -> Token:
        self._advance()  # opening quote
        chars: List[str] = []
        while True:
            if self.pos >= len(self.source):
                raise UnterminatedString("unterminated string", line, column)
            char = self._advance()
            if char == '"':
                return Token(TokenKind.STRING, ''.join(chars), line, column)
            if char == '\\':
                escape_line, escape_column = self.line, self.column - 1
                if self.pos >= len(self.source):
                    raise UnterminatedString("unterminated string", line, column)
                code = self._advance()
                if code not in ESCAPES:
                    raise InvalidEscape(
                        f"unknown escape code \\{code}", escape_line, escape_column
                    )
                chars.append(ESCAPES[code])
            else:
                chars.append(char)

    def _scan_identifier(self, line: int, column: int) -> Token:
        start = self.pos
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char.isspace() or char in _IDENTIFIER_STOP:
                break
            self._advance()
        return Token(TokenKind.IDENTIFIER, self.source[start:self.pos], line, column)

    def next_token(self) -> Token:
        self._skip_trivia()
        line, column = self.line, self.column
        char = self._peek()
        if not char:
            return Token(TokenKind.END, '', line, column)
        if char in _DELIMITERS:
            self._advance()
            return Token(_DELIMITERS[char], char, line, column)
        if char == '"':
            return self._scan_string(line, column)
        return self._scan_identifier(line, column)

    def tokenize(self) -> List[Token]:
        """Scan the whole source. The last token is always ``END``."""
        tokens: List[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind is TokenKind.END:
                return tokens
