"""FormulaEvaluator: classifies a formula and computes its display value.

Dispatch order for a formula ``=expression``:

1. A registered function prefix ``NAME(`` (case-insensitive, first match
   wins). The argument is everything between that parenthesis and the last
   character; parentheses are not balanced.
2. Otherwise a generic arithmetic expression over cell references.

Every failure becomes the ``#ERROR!`` sentinel; ``evaluate`` never raises.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from sheetcalc.calc._arith import evaluate_arithmetic
from sheetcalc.calc._errors import ERROR_SENTINEL
from sheetcalc.calc._functions import (
    FunctionRegistry,
    format_number,
    format_result,
    leading_number,
)
from sheetcalc.calc._parser import CellRef, parse_cell_reference, split_argument
from sheetcalc.calc._protocol import Lookup

logger = logging.getLogger(__name__)


class FormulaEvaluator:
    """Evaluates formula text against a cell-value lookup.

    Usage::

        evaluator = FormulaEvaluator()
        evaluator.evaluate("=SUM(A1:A3)", lambda row, col: values[(row, col)])

    The evaluator keeps no state between calls besides its function registry.
    """

    def __init__(self, functions: FunctionRegistry | None = None) -> None:
        self._functions = functions if functions is not None else FunctionRegistry()

    @property
    def functions(self) -> FunctionRegistry:
        return self._functions

    def register(
        self, name: str, func: Callable[..., Any], single_ref: bool = False,
    ) -> None:
        """Register a custom function, tried after the builtins."""
        self._functions.register(name, func, single_ref=single_ref)

    def evaluate(self, formula: str, lookup: Lookup) -> str:
        """Evaluate *formula*; text without a leading ``=`` is returned as is."""
        if not formula.startswith("="):
            return formula
        expression = formula[1:].strip()
        try:
            return self._eval_expression(expression, lookup)
        except Exception as e:
            logger.debug("Formula evaluation error for %r: %s", formula, e)
            return ERROR_SENTINEL

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _eval_expression(self, expression: str, lookup: Lookup) -> str:
        matched = self._functions.match_prefix(expression)
        if matched is not None:
            name, func = matched
            arg = expression[len(name) + 1 : -1]
            return self._eval_function(name, func, arg, lookup)
        return self._eval_arithmetic(expression, lookup)

    def _eval_function(
        self, name: str, func: Callable[..., Any], arg: str, lookup: Lookup,
    ) -> str:
        if self._functions.is_single_ref(name):
            ref = parse_cell_reference(arg)
            return format_result(func(lookup(ref.row, ref.col)))
        values = [lookup(ref.row, ref.col) for ref in split_argument(arg)]
        return format_result(func(values))

    def _eval_arithmetic(self, expression: str, lookup: Lookup) -> str:
        def resolve(ref: CellRef) -> float:
            # Empty and non-numeric cells count as 0.
            num = leading_number(lookup(ref.row, ref.col))
            return 0.0 if num is None else num

        return format_number(evaluate_arithmetic(expression, resolve))


_default_evaluator = FormulaEvaluator()


def evaluate(formula: str, lookup: Lookup) -> str:
    """Evaluate *formula* with the builtin functions. Never raises."""
    return _default_evaluator.evaluate(formula, lookup)
