"""Custom exceptions for the FML interpreter."""

from typing import Optional


class FmlInterpreterError(Exception):
    """Base exception for FML interpreter errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ParsingError(FmlInterpreterError):
    """Malformed markup. Always fatal for the whole document."""

    def __init__(self, message: str, line: int, column: int, details: Optional[str] = None):
        super().__init__(message, details)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        text = f"{self.message} at line {self.line}, column {self.column}"
        if self.details:
            return f"{text} ({self.details})"
        return text


class UnmatchedDelimiter(ParsingError):
    """A parenthesis or brace without its partner."""

    pass


class UnterminatedString(ParsingError):
    """String literal running to the end of input."""

    pass


class InvalidEscape(ParsingError):
    """Unknown backslash escape inside a string literal."""

    pass


class UnknownBuiltin(ParsingError):
    """List head symbol that names no builtin item."""

    pass


class UnexpectedToken(ParsingError):
    """Token of the wrong kind in an otherwise balanced list."""

    pass


class BuildError(FmlInterpreterError):
    """Exception raised when an item violates its builtin's shape."""

    def __init__(self, message: str, line: int = 0, column: int = 0, details: Optional[str] = None):
        super().__init__(message, details)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        text = super().__str__()
        if self.line:
            return f"{text} (line {self.line}, column {self.column})"
        return text


class LayoutError(FmlInterpreterError):
    """Exception raised during layout calculation."""

    pass


class ShapingTimeout(LayoutError):
    """The text shaper did not answer in time. Retryable by the caller."""

    pass


class RenderingError(FmlInterpreterError):
    """Exception raised during document rendering."""

    pass
