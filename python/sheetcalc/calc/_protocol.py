"""Lookup / CalcEngine protocols and recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Lookup(Protocol):
    """Reads a cell's current value; ``""`` for unpopulated cells."""

    def __call__(self, row: int, col: str) -> str: ...


@runtime_checkable
class CalcEngine(Protocol):
    """Protocol for formula evaluation engines."""

    def evaluate(self, formula: str, lookup: Lookup) -> str:
        """Evaluate formula text to its display string.

        Text that is not a formula comes back unchanged; failures come back
        as the error sentinel instead of raising.
        """
        ...


@dataclass(frozen=True)
class CellDelta:
    """A single cell's value change from recalculation."""

    cell_ref: str  # "A1"
    old_value: str
    new_value: str
    formula: str = ""  # the formula that produced new_value


@dataclass(frozen=True)
class RecalcResult:
    """Result of a full-sheet recalculation pass."""

    deltas: tuple[CellDelta, ...]  # cells that changed
    total_formula_cells: int = 0

    @property
    def changed_cells(self) -> int:
        return len(self.deltas)

    @property
    def change_ratio(self) -> float:
        if self.total_formula_cells == 0:
            return 0.0
        return self.changed_cells / self.total_formula_cells
