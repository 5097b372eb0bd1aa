"""Reference resolver: column names, ``A1`` references and range expansion."""

from __future__ import annotations

import re
from typing import NamedTuple

from sheetcalc.calc._errors import EmptyRangeError, ReferenceParseError

# ---------------------------------------------------------------------------
# Regex patterns for cell references
# ---------------------------------------------------------------------------

# Uppercase letters followed by digits; lowercase refs are not references.
_CELL_REF_RE = re.compile(r"([A-Z]+)([0-9]+)")

_COLUMN_NAME_RE = re.compile(r"^[A-Z]+$")


class CellRef(NamedTuple):
    """A (row, column-name) address. Rows are 1-based."""

    row: int
    col: str

    def __str__(self) -> str:
        return f"{self.col}{self.row}"

    @property
    def col_index(self) -> int:
        return col_name_to_index(self.col)


# ---------------------------------------------------------------------------
# Column name <-> index
# ---------------------------------------------------------------------------


def column_index_to_name(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA, 701 -> ZZ, 702 -> AAA."""
    if index < 0:
        raise ValueError(f"Column index must be >= 0: {index}")
    name = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        name = chr(rem + ord("A")) + name
    return name


def col_name_to_index(name: str) -> int:
    """A -> 0, Z -> 25, AA -> 26. Inverse of :func:`column_index_to_name`."""
    if not _COLUMN_NAME_RE.match(name):
        raise ValueError(f"Invalid column name: {name!r}")
    n = 0
    for ch in name:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


# ---------------------------------------------------------------------------
# Reference parsing
# ---------------------------------------------------------------------------


def parse_cell_reference(text: str) -> CellRef:
    """Parse the first ``A1``-style reference found anywhere in *text*.

    The row is not validated, so ``"A0"`` parses to ``CellRef(0, "A")``.
    Raises :class:`ReferenceParseError` when nothing matches.
    """
    m = _CELL_REF_RE.search(text)
    if not m:
        raise ReferenceParseError(f"Invalid cell reference: {text!r}")
    return CellRef(row=int(m.group(2)), col=m.group(1))


def find_references(expression: str) -> list[CellRef]:
    """Every cell reference in *expression*, in order of appearance."""
    return [
        CellRef(row=int(m.group(2)), col=m.group(1))
        for m in _CELL_REF_RE.finditer(expression)
    ]


def _as_ref(ref: CellRef | str) -> CellRef:
    if isinstance(ref, CellRef):
        return ref
    return parse_cell_reference(ref)


# ---------------------------------------------------------------------------
# Range expansion
# ---------------------------------------------------------------------------


def expand_range(start: CellRef | str, end: CellRef | str) -> list[CellRef]:
    """Expand the rectangle between *start* and *end*, row-major.

    >>> [str(r) for r in expand_range("A1", "B2")]
    ['A1', 'B1', 'A2', 'B2']

    Endpoints are not reordered: when ``start`` lies below or to the right
    of ``end`` the result is empty.
    """
    start_ref = _as_ref(start)
    end_ref = _as_ref(end)
    start_col = start_ref.col_index
    end_col = end_ref.col_index

    cells: list[CellRef] = []
    for row in range(start_ref.row, end_ref.row + 1):
        for col in range(start_col, end_col + 1):
            cells.append(CellRef(row=row, col=column_index_to_name(col)))
    return cells


# ---------------------------------------------------------------------------
# Function arguments
# ---------------------------------------------------------------------------


def split_argument(arg: str) -> list[CellRef]:
    """Resolve a function argument into the references it names.

    ``A1:B5`` is a range (only the first two ``:`` parts count),
    ``A1,B2,C3`` a list, anything else a single reference.
    """
    if ":" in arg:
        parts = arg.split(":")
        cells = expand_range(parts[0], parts[1])
        if not cells:
            raise EmptyRangeError(f"Range {arg!r} covers no cells")
        return cells
    return [parse_cell_reference(piece.strip()) for piece in arg.split(",")]
