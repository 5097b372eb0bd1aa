"""sheetcalc - spreadsheet formula engine and sparse cell store.

Usage::

    from sheetcalc import Sheet, evaluate

    # Evaluate against any lookup
    values = {(1, "A"): "1", (2, "A"): "2"}
    evaluate("=SUM(A1:A2)", lambda row, col: values.get((row, col), ""))  # "3"

    # Or let a Sheet own the cells
    sheet = Sheet()
    sheet["A1"] = "10"
    sheet["A2"] = "=A1*2"
    print(sheet["A2"].value)  # "20"
"""

from sheetcalc._cell import Cell, CellFormatting
from sheetcalc._sheet import DEFAULT_COLS, DEFAULT_ROWS, CellRange, Sheet, SheetSnapshot
from sheetcalc.calc import (
    ERROR_SENTINEL,
    CellRef,
    FormulaEvaluator,
    col_name_to_index,
    column_index_to_name,
    evaluate,
    expand_range,
    parse_cell_reference,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Cell",
    "CellFormatting",
    "CellRange",
    "CellRef",
    "DEFAULT_COLS",
    "DEFAULT_ROWS",
    "ERROR_SENTINEL",
    "FormulaEvaluator",
    "Sheet",
    "SheetSnapshot",
    "col_name_to_index",
    "column_index_to_name",
    "evaluate",
    "expand_range",
    "parse_cell_reference",
]
