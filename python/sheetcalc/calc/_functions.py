"""Builtin function implementations, numeric coercion and result formatting."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Callable

# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------

# Leading numeric run: "12abc" -> 12, "  -3.5e2x" -> -350, "abc" -> no match.
_LEADING_NUMBER_RE = re.compile(
    r"^\s*[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def leading_number(value: str) -> float | None:
    """Parse the leading numeric portion of *value*, or None if there is none."""
    m = _LEADING_NUMBER_RE.match(value)
    if not m:
        return None
    return float(m.group().strip().replace("Infinity", "inf"))


def is_numeric(value: str) -> bool:
    return value != "" and leading_number(value) is not None


def _coerce_numeric(values: list[str]) -> list[float]:
    """Drop empty and non-numeric values; parse the rest."""
    result: list[float] = []
    for v in values:
        if v == "":
            continue
        num = leading_number(v)
        if num is not None:
            result.append(num)
    return result


# ---------------------------------------------------------------------------
# Result formatting
# ---------------------------------------------------------------------------


def format_number(value: float) -> str:
    """Shortest round-trip decimal form of *value*.

    Integral values drop the fraction (``3.0`` -> ``"3"``); exponents below
    -6 or above 20 switch to ``1e-7`` / ``1e+21`` notation.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent  # decimal point position relative to the digit string

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        exp = n - 1
        mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
        body = f"{mantissa}e{'+' if exp >= 0 else '-'}{abs(exp)}"
    return sign + body


def format_result(value: Any) -> str:
    """Stringify a builtin's return value for display."""
    if isinstance(value, str):
        return value
    return format_number(float(value))


# ---------------------------------------------------------------------------
# Builtin implementations.
# Aggregates take the list of resolved cell values; single-cell functions
# (marked ``_single_ref``) take one value.
# ---------------------------------------------------------------------------


def _add_left_to_right(nums: list[float]) -> float:
    # Uncompensated left-to-right addition, same result as chained "+".
    total = 0.0
    for n in nums:
        total += n
    return total


def _builtin_sum(values: list[str]) -> float:
    return _add_left_to_right(_coerce_numeric(values))


def _builtin_average(values: list[str]) -> float:
    nums = _coerce_numeric(values)
    if not nums:
        return 0.0
    return _add_left_to_right(nums) / len(nums)


def _builtin_max(values: list[str]) -> float:
    nums = _coerce_numeric(values)
    if not nums:
        return 0.0
    return max(nums)


def _builtin_min(values: list[str]) -> float:
    nums = _coerce_numeric(values)
    if not nums:
        return 0.0
    return min(nums)


def _builtin_count(values: list[str]) -> int:
    """COUNT - counts numeric, non-empty values."""
    return len(_coerce_numeric(values))


def _builtin_trim(value: str) -> str:
    """TRIM: strip leading/trailing whitespace only."""
    return value.strip()


def _builtin_upper(value: str) -> str:
    return value.upper()


def _builtin_lower(value: str) -> str:
    return value.lower()


_builtin_trim._single_ref = True  # type: ignore[attr-defined]
_builtin_upper._single_ref = True  # type: ignore[attr-defined]
_builtin_lower._single_ref = True  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

# Order matters: dispatch tries names in this order and the first
# ``NAME(`` prefix that matches wins.
_BUILTINS: dict[str, Callable[..., Any]] = {
    # Aggregate
    "SUM": _builtin_sum,
    "AVERAGE": _builtin_average,
    "MAX": _builtin_max,
    "MIN": _builtin_min,
    "COUNT": _builtin_count,
    # Text
    "TRIM": _builtin_trim,
    "UPPER": _builtin_upper,
    "LOWER": _builtin_lower,
}

FUNCTION_NAMES: tuple[str, ...] = tuple(_BUILTINS)


def is_supported(func_name: str) -> bool:
    """Check if a function name is a builtin."""
    return func_name.upper() in _BUILTINS


def takes_single_ref(func: Callable[..., Any]) -> bool:
    return getattr(func, "_single_ref", False)


class FunctionRegistry:
    """Ordered registry of callable function implementations.

    Starts with builtins and can be extended with custom functions, which
    are tried after the builtins in registration order.
    """

    def __init__(self) -> None:
        self._functions: dict[str, Callable[..., Any]] = dict(_BUILTINS)
        self._single_ref: set[str] = {
            name for name, func in _BUILTINS.items() if takes_single_ref(func)
        }

    def register(
        self, name: str, func: Callable[..., Any], single_ref: bool = False,
    ) -> None:
        """Add or replace *name*. Single-ref functions receive one cell value."""
        key = name.upper()
        self._functions[key] = func
        if single_ref:
            self._single_ref.add(key)
        else:
            self._single_ref.discard(key)

    def get(self, name: str) -> Callable[..., Any] | None:
        return self._functions.get(name.upper())

    def has(self, name: str) -> bool:
        return name.upper() in self._functions

    def is_single_ref(self, name: str) -> bool:
        return name.upper() in self._single_ref

    def match_prefix(self, expression: str) -> tuple[str, Callable[..., Any]] | None:
        """First registered ``NAME(`` that *expression* starts with (case-insensitive)."""
        upper = expression.upper()
        for name, func in self._functions.items():
            if upper.startswith(name + "("):
                return name, func
        return None

    @property
    def supported_functions(self) -> frozenset[str]:
        return frozenset(self._functions.keys())
