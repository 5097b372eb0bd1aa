"""Formula error kinds.

Every kind collapses to the same display sentinel at the ``evaluate``
boundary; the subclasses exist so the engine's internals can be tested
separately.
"""

from __future__ import annotations

from typing import Any

ERROR_SENTINEL = "#ERROR!"


class FormulaError(Exception):
    """Base for all formula errors. ``code`` is the cell display string."""

    code: str = ERROR_SENTINEL


class ReferenceParseError(FormulaError, ValueError):
    """Text does not contain an ``A1``-style cell reference."""


class EmptyRangeError(FormulaError):
    """A range argument expanded to zero cells."""


class ExpressionSyntaxError(FormulaError):
    """The arithmetic parser rejected an expression."""

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


def is_error(val: Any) -> bool:
    """Return True if *val* is the error sentinel."""
    return val == ERROR_SENTINEL
