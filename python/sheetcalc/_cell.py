"""Cell and formatting records held by a :class:`~sheetcalc.Sheet`."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_FONT_SIZE = 12
DEFAULT_COLOR = "#000000"


@dataclass(frozen=True)
class CellFormatting:
    """Display attributes. The formula engine never reads these."""

    bold: bool = False
    italic: bool = False
    font_size: int = DEFAULT_FONT_SIZE
    color: str = DEFAULT_COLOR


@dataclass(frozen=True)
class Cell:
    """One cell's contents.

    ``value`` is what the cell displays: the literal text, or the last
    computed result when ``formula`` is set.
    """

    value: str = ""
    formula: str = ""
    formatting: CellFormatting = field(default_factory=CellFormatting)

    @property
    def is_formula(self) -> bool:
        return bool(self.formula)

    @property
    def is_empty(self) -> bool:
        return not self.value and not self.formula


EMPTY_CELL = Cell()
