"""Sheet: sparse cell store that drives the formula engine.

The store owns every cell and hands the evaluator immutable snapshots, so a
recalculation pass sees one consistent set of inputs.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from sheetcalc._cell import EMPTY_CELL, Cell
from sheetcalc.calc._evaluator import FormulaEvaluator
from sheetcalc.calc._parser import (
    CellRef,
    col_name_to_index,
    column_index_to_name,
    parse_cell_reference,
)
from sheetcalc.calc._protocol import CalcEngine, CellDelta, RecalcResult

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 100
DEFAULT_COLS = 26  # A to Z


@dataclass(frozen=True)
class SheetSnapshot:
    """Read-only view of cell values, usable directly as a lookup."""

    values: Mapping[tuple[int, str], str]

    def __call__(self, row: int, col: str) -> str:
        return self.values.get((row, col), "")

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class CellRange:
    """A selected rectangle, endpoints as given."""

    start: CellRef
    end: CellRef


class Sheet:
    """A grid of cells addressed by (row, column name).

    Rows are 1-based, columns are letter names. Cells are stored sparsely;
    unpopulated cells read as empty.
    """

    __slots__ = (
        "_title", "_cells", "_num_rows", "_num_cols",
        "_selected_range", "_engine",
    )

    def __init__(
        self,
        title: str = "Sheet1",
        num_rows: int = DEFAULT_ROWS,
        num_cols: int = DEFAULT_COLS,
        engine: CalcEngine | None = None,
    ) -> None:
        if num_rows < 0 or num_cols < 0:
            raise ValueError("Sheet dimensions must be non-negative")
        self._title = title
        # (row, 0-based column index) -> Cell
        self._cells: dict[tuple[int, int], Cell] = {}
        self._num_rows = num_rows
        self._num_cols = num_cols
        self._selected_range: CellRange | None = None
        self._engine: CalcEngine = engine if engine is not None else FormulaEvaluator()

    @property
    def title(self) -> str:
        return self._title

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def num_cols(self) -> int:
        return self._num_cols

    @property
    def selected_range(self) -> CellRange | None:
        return self._selected_range

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Cell:
        """``sheet['A1']`` -> Cell."""
        ref = parse_cell_reference(key)
        return self.get_cell(ref.row, ref.col)

    def __setitem__(self, key: str, value: str) -> None:
        """``sheet['A1'] = '=SUM(B1:B3)'``; a leading ``=`` marks a formula."""
        ref = parse_cell_reference(key)
        self.update_cell_value(ref.row, ref.col, value, is_formula=value.startswith("="))

    def get_cell(self, row: int, col: str) -> Cell:
        return self._cells.get((row, col_name_to_index(col)), EMPTY_CELL)

    def get_cell_value(self, row: int, col: str) -> str:
        return self.get_cell(row, col).value

    def get_display_value(self, row: int, col: str) -> str:
        """What the grid shows: the literal, or a formula's last result."""
        return self.get_cell(row, col).value

    def snapshot(self) -> SheetSnapshot:
        values = {
            (row, column_index_to_name(c)): cell.value
            for (row, c), cell in self._cells.items()
        }
        return SheetSnapshot(MappingProxyType(values))

    def update_cell_value(
        self, row: int, col: str, value: str, is_formula: bool = False,
    ) -> Cell:
        """Write a literal, or a formula whose value is computed immediately.

        The formula sees the sheet as it was before this write.
        """
        self._check_row(row)
        key = (row, col_name_to_index(col))
        current = self._cells.get(key, EMPTY_CELL)
        if is_formula:
            result = self._engine.evaluate(value, self.snapshot())
            cell = dataclasses.replace(current, formula=value, value=result)
        else:
            cell = dataclasses.replace(current, value=value, formula="")
        self._store(key, cell)
        return cell

    def update_cell_formatting(self, row: int, col: str, **changes: Any) -> Cell:
        """Merge formatting fields (``bold``, ``italic``, ``font_size``, ``color``)."""
        self._check_row(row)
        key = (row, col_name_to_index(col))
        current = self._cells.get(key, EMPTY_CELL)
        formatting = dataclasses.replace(current.formatting, **changes)
        cell = dataclasses.replace(current, formatting=formatting)
        self._cells[key] = cell
        return cell

    def _store(self, key: tuple[int, int], cell: Cell) -> None:
        if cell == EMPTY_CELL:
            self._cells.pop(key, None)
        else:
            self._cells[key] = cell

    # ------------------------------------------------------------------
    # Recalculation
    # ------------------------------------------------------------------

    def evaluate_cell(self, row: int, col: str) -> str:
        """Recompute one formula cell and store the result."""
        key = (row, col_name_to_index(col))
        cell = self._cells.get(key, EMPTY_CELL)
        if not cell.formula:
            return cell.value
        result = self._engine.evaluate(cell.formula, self.snapshot())
        self._cells[key] = dataclasses.replace(cell, value=result)
        return result

    def recalculate_all(self) -> RecalcResult:
        """Evaluate every formula cell against one pre-pass snapshot.

        Formulas that read other formula cells see their previous values;
        there is no dependency ordering.
        """
        snapshot = self.snapshot()
        formula_keys = sorted(k for k, cell in self._cells.items() if cell.formula)

        deltas: list[CellDelta] = []
        for key in formula_keys:
            cell = self._cells[key]
            result = self._engine.evaluate(cell.formula, snapshot)
            if result != cell.value:
                row, c = key
                deltas.append(CellDelta(
                    cell_ref=f"{column_index_to_name(c)}{row}",
                    old_value=cell.value,
                    new_value=result,
                    formula=cell.formula,
                ))
                self._cells[key] = dataclasses.replace(cell, value=result)

        logger.debug(
            "Recalculated %d formula cells in %s, %d changed",
            len(formula_keys), self._title, len(deltas),
        )
        return RecalcResult(deltas=tuple(deltas), total_formula_cells=len(formula_keys))

    # ------------------------------------------------------------------
    # Row / column mutation
    # ------------------------------------------------------------------

    def add_row(self, after_row: int | None = None) -> int:
        """Insert a blank row after *after_row* (append when None).

        Returns the new row's number. Formulas are not rewritten.
        """
        if after_row is None:
            position = self._num_rows + 1
        else:
            if after_row < 0 or after_row > self._num_rows:
                raise ValueError(f"Row {after_row} is outside 0..{self._num_rows}")
            position = after_row + 1
        self._cells = {
            ((r + 1 if r >= position else r), c): cell
            for (r, c), cell in self._cells.items()
        }
        self._num_rows += 1
        logger.info("Row added at position %d in %s", position, self._title)
        return position

    def delete_row(self, row: int) -> None:
        """Remove *row*, shifting later rows up."""
        self._check_row(row)
        self._cells = {
            ((r - 1 if r > row else r), c): cell
            for (r, c), cell in self._cells.items()
            if r != row
        }
        self._num_rows -= 1
        logger.info("Row %d deleted from %s", row, self._title)

    def add_column(self, after_col: str | None = None) -> str:
        """Insert a blank column after *after_col* (append when None).

        Returns the new column's name. Formulas are not rewritten.
        """
        if after_col is None:
            index = self._num_cols
        else:
            after = col_name_to_index(after_col)
            if after >= self._num_cols:
                raise ValueError(f"Column {after_col} is outside the sheet")
            index = after + 1
        self._cells = {
            (r, (c + 1 if c >= index else c)): cell
            for (r, c), cell in self._cells.items()
        }
        self._num_cols += 1
        name = column_index_to_name(index)
        logger.info("Column %s added to %s", name, self._title)
        return name

    def delete_column(self, col: str) -> None:
        """Remove column *col*, shifting later columns left."""
        index = col_name_to_index(col)
        if index >= self._num_cols:
            raise ValueError(f"Column {col} is outside the sheet")
        self._cells = {
            (r, (c - 1 if c > index else c)): cell
            for (r, c), cell in self._cells.items()
            if c != index
        }
        self._num_cols -= 1
        logger.info("Column %s deleted from %s", col, self._title)

    def _check_row(self, row: int) -> None:
        if row < 1 or row > self._num_rows:
            raise ValueError(f"Row {row} is outside 1..{self._num_rows}")

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_selected_range(self, start: CellRef | str, end: CellRef | str) -> None:
        if isinstance(start, str):
            start = parse_cell_reference(start)
        if isinstance(end, str):
            end = parse_cell_reference(end)
        self._selected_range = CellRange(start=start, end=end)

    def clear_selected_range(self) -> None:
        self._selected_range = None

    # ------------------------------------------------------------------
    # Bulk edits
    # ------------------------------------------------------------------

    def find_and_replace(self, find: str, replace: str, selected_only: bool = False) -> int:
        """Replace regex *find* with literal *replace* in non-formula cells.

        Searches the selected range when *selected_only* is set and a range
        is selected, otherwise the whole sheet. Returns the number of cells
        changed.
        """
        if not find:
            return 0
        pattern = re.compile(find)

        r_min, r_max = 1, self._num_rows
        c_min, c_max = 0, self._num_cols - 1
        if selected_only and self._selected_range is not None:
            start, end = self._selected_range.start, self._selected_range.end
            r_min, r_max = start.row, end.row
            c_min, c_max = start.col_index, end.col_index

        replaced = 0
        for (r, c), cell in list(self._cells.items()):
            if not (r_min <= r <= r_max and c_min <= c <= c_max) or cell.formula:
                continue
            new_value = pattern.sub(lambda _m: replace, cell.value)
            if new_value != cell.value:
                self._store((r, c), dataclasses.replace(cell, value=new_value))
                replaced += 1

        logger.info("Find and replace: replaced %d cells in %s", replaced, self._title)
        return replaced

    def remove_duplicates(self, columns: list[str]) -> int:
        """Drop rows whose values in *columns* repeat an earlier row.

        Remaining rows are compacted upwards. Returns the number removed.
        """
        if not columns:
            return 0
        indices = [col_name_to_index(col) for col in columns]

        seen: set[tuple[str, ...]] = set()
        new_row_of: dict[int, int] = {}
        next_row = 1
        for row in range(1, self._num_rows + 1):
            key = tuple(self._cells.get((row, c), EMPTY_CELL).value for c in indices)
            if key in seen:
                continue
            seen.add(key)
            new_row_of[row] = next_row
            next_row += 1

        removed = self._num_rows - len(new_row_of)
        self._cells = {
            (new_row_of[r], c): cell
            for (r, c), cell in self._cells.items()
            if r in new_row_of
        }
        self._num_rows -= removed
        logger.info("Removed %d duplicate rows from %s", removed, self._title)
        return removed

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iter_rows(
        self,
        min_row: int | None = None,
        max_row: int | None = None,
        min_col: str | None = None,
        max_col: str | None = None,
        values_only: bool = False,
    ) -> Iterator[tuple[Any, ...]]:
        """Iterate over rows in a range, as Cells or as their values."""
        r_min = min_row or 1
        r_max = max_row or self._num_rows
        c_min = col_name_to_index(min_col) if min_col else 0
        c_max = col_name_to_index(max_col) if max_col else self._num_cols - 1

        for r in range(r_min, r_max + 1):
            cells = (self._cells.get((r, c), EMPTY_CELL) for c in range(c_min, c_max + 1))
            if values_only:
                yield tuple(cell.value for cell in cells)
            else:
                yield tuple(cells)

    def __repr__(self) -> str:
        return f"<Sheet [{self._title}] {self._num_rows}x{self._num_cols}>"
