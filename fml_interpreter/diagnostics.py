"""
Recoverable problems found while building or laying out a page.

Fatal grammar problems are exceptions (see :mod:`fml_interpreter.exceptions`);
everything that can be pinned to a single node is recorded here instead and
the node degrades to a fallback rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    UNKNOWN_STYLE_REFERENCE = "unknown-style-reference"
    RECURSIVE_STYLE = "recursive-style"
    INVALID_STYLE_ARGUMENT = "invalid-style-argument"
    UNKNOWN_MODIFIER = "unknown-modifier"
    DUPLICATE_ANCHOR = "duplicate-anchor"
    UNRESOLVED_BINARY_REFERENCE = "unresolved-binary-reference"
    INVALID_FILL_RATIO = "invalid-fill-ratio"
    ZERO_AVAILABLE_WIDTH = "zero-available-width"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.line:
            return f"{self.kind.value}: {self.message} (line {self.line}, column {self.column})"
        return f"{self.kind.value}: {self.message}"


class DiagnosticCollector:
    """Ordered list of diagnostics; every report is also logged as a warning."""

    def __init__(self, initial: Optional[List[Diagnostic]] = None):
        self._items: List[Diagnostic] = list(initial or [])

    def report(self, kind: DiagnosticKind, message: str, line: int = 0, column: int = 0) -> Diagnostic:
        diagnostic = Diagnostic(kind, message, line, column)
        self._items.append(diagnostic)
        logger.warning(str(diagnostic))
        return diagnostic

    def extend(self, diagnostics: List[Diagnostic]) -> None:
        self._items.extend(diagnostics)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [item for item in self._items if item.kind is kind]

    def to_list(self) -> List[Diagnostic]:
        return list(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
