"""Exception hierarchy for daysie.

All errors raised by the resolver derive from :class:`DaysieError` so hosts
can catch a single type around user input handling.

Usage:
    from daysie.exceptions import DaysieError, ExpressionSyntaxError

    try:
        value = resolver.parse(query)
    except ExpressionSyntaxError as e:
        print(e.pointer())
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class DaysieError(Exception):
    """Base exception for all daysie errors.

    Attributes:
        cause: Underlying exception (optional)
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ExpressionSyntaxError(DaysieError):
    """No grammar alternative consumed the input at ``position``.

    Attributes:
        text: The expression that failed to parse
        position: Character offset of the furthest failure
        expected: Labels of the rules that were tried at that offset

    Example:
        >>> raise ExpressionSyntaxError("banana", 0, ["date", "keyword"])
    """

    def __init__(self, text: str, position: int, expected: Sequence[str] = ()):
        self.text = text
        self.position = position
        self.expected = tuple(expected)
        if position >= len(text):
            found = "end of input"
        else:
            found = repr(text[position:position + 10])
        message = f"Cannot parse temporal expression at offset {position}: unexpected {found}"
        if self.expected:
            message += f" (expected {', '.join(self.expected)})"
        super().__init__(message)

    def pointer(self) -> str:
        """Render the expression with a caret under the failing offset."""
        return f"{self.text}\n{' ' * self.position}^"


class UnsupportedUnitError(DaysieError):
    """A calendar-arithmetic branch received a unit it has no rule for.

    Attributes:
        unit: The offending unit value
    """

    def __init__(self, unit: Any, operation: Optional[str] = None):
        self.unit = unit
        self.operation = operation
        message = f"Unsupported chrono unit: {unit!r}"
        if operation:
            message += f" for {operation}"
        super().__init__(message)


class InvalidRangeError(DaysieError, ValueError):
    """A finite range would end before it starts."""

    def __init__(self, start: Any, end: Any):
        self.start = start
        self.end = end
        super().__init__(f"Range start {start} is after its end {end}")


class ConfigurationError(DaysieError):
    """Settings or keyword configuration are unusable."""


class GrammarError(DaysieError):
    """The grammar was assembled incorrectly (e.g. an unbound reference)."""
