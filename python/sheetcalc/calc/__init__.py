"""sheetcalc.calc - Formula evaluation engine for sheetcalc sheets."""

from sheetcalc.calc._arith import evaluate_arithmetic
from sheetcalc.calc._errors import (
    ERROR_SENTINEL,
    EmptyRangeError,
    ExpressionSyntaxError,
    FormulaError,
    ReferenceParseError,
    is_error,
)
from sheetcalc.calc._evaluator import FormulaEvaluator, evaluate
from sheetcalc.calc._functions import (
    FUNCTION_NAMES,
    FunctionRegistry,
    format_number,
    is_supported,
    leading_number,
)
from sheetcalc.calc._parser import (
    CellRef,
    col_name_to_index,
    column_index_to_name,
    expand_range,
    find_references,
    parse_cell_reference,
    split_argument,
)
from sheetcalc.calc._protocol import CalcEngine, CellDelta, Lookup, RecalcResult

__all__ = [
    "CalcEngine",
    "CellDelta",
    "CellRef",
    "ERROR_SENTINEL",
    "EmptyRangeError",
    "ExpressionSyntaxError",
    "FUNCTION_NAMES",
    "FormulaError",
    "FormulaEvaluator",
    "FunctionRegistry",
    "Lookup",
    "RecalcResult",
    "ReferenceParseError",
    "col_name_to_index",
    "column_index_to_name",
    "evaluate",
    "evaluate_arithmetic",
    "expand_range",
    "find_references",
    "format_number",
    "is_error",
    "is_supported",
    "leading_number",
    "parse_cell_reference",
    "split_argument",
]
