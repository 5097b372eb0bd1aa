"""Tests for sheetcalc.calc reference resolver and range expansion."""

from __future__ import annotations

import pytest

from sheetcalc.calc._errors import EmptyRangeError, ReferenceParseError
from sheetcalc.calc._parser import (
    CellRef,
    col_name_to_index,
    column_index_to_name,
    expand_range,
    find_references,
    parse_cell_reference,
    split_argument,
)


def _names(refs: list[CellRef]) -> list[str]:
    return [str(r) for r in refs]


class TestColumnIndexToName:
    @pytest.mark.parametrize(
        ("index", "name"),
        [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"),
         (52, "BA"), (701, "ZZ"), (702, "AAA"), (16383, "XFD")],
    )
    def test_known_values(self, index: int, name: str) -> None:
        assert column_index_to_name(index) == name

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            column_index_to_name(-1)


class TestColNameToIndex:
    @pytest.mark.parametrize(
        ("name", "index"),
        [("A", 0), ("Z", 25), ("AA", 26), ("AZ", 51), ("ZZ", 701), ("AAA", 702)],
    )
    def test_known_values(self, name: str, index: int) -> None:
        assert col_name_to_index(name) == index

    def test_lowercase_rejected(self) -> None:
        with pytest.raises(ValueError):
            col_name_to_index("a")

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            col_name_to_index("")


class TestColumnBijection:
    def test_index_roundtrip(self) -> None:
        for i in range(0, 20000):
            assert col_name_to_index(column_index_to_name(i)) == i

    def test_name_roundtrip(self) -> None:
        letters = [chr(c) for c in range(ord("A"), ord("Z") + 1)]
        names = letters + [a + b for a in letters for b in letters]
        names += [a + b + c for a in "AMZ" for b in letters for c in "AQZ"]
        for name in names:
            assert column_index_to_name(col_name_to_index(name)) == name


class TestParseCellReference:
    def test_simple(self) -> None:
        assert parse_cell_reference("A1") == CellRef(row=1, col="A")

    def test_multi_letter(self) -> None:
        assert parse_cell_reference("AB123") == CellRef(row=123, col="AB")

    def test_first_match_anywhere(self) -> None:
        assert parse_cell_reference("  x B7 C9") == CellRef(row=7, col="B")

    def test_row_not_validated(self) -> None:
        assert parse_cell_reference("A0") == CellRef(row=0, col="A")

    def test_lowercase_not_a_reference(self) -> None:
        with pytest.raises(ReferenceParseError):
            parse_cell_reference("a1")

    def test_no_match(self) -> None:
        with pytest.raises(ReferenceParseError, match="Invalid cell reference"):
            parse_cell_reference("hello")

    def test_empty(self) -> None:
        with pytest.raises(ReferenceParseError):
            parse_cell_reference("")

    def test_str_roundtrip(self) -> None:
        assert str(parse_cell_reference("ZZ10")) == "ZZ10"


class TestFindReferences:
    def test_in_order(self) -> None:
        assert _names(find_references("A1+B2*(C3-A1)")) == ["A1", "B2", "C3", "A1"]

    def test_none(self) -> None:
        assert find_references("1+2") == []


class TestExpandRange:
    def test_block_range_row_major(self) -> None:
        cells = expand_range(CellRef(1, "A"), CellRef(2, "B"))
        assert _names(cells) == ["A1", "B1", "A2", "B2"]

    def test_column_range(self) -> None:
        assert _names(expand_range("A1", "A5")) == ["A1", "A2", "A3", "A4", "A5"]

    def test_row_range(self) -> None:
        assert _names(expand_range("B2", "D2")) == ["B2", "C2", "D2"]

    def test_single_cell_range(self) -> None:
        assert _names(expand_range("A1", "A1")) == ["A1"]

    def test_across_z(self) -> None:
        assert _names(expand_range("Y1", "AB1")) == ["Y1", "Z1", "AA1", "AB1"]

    def test_restartable(self) -> None:
        first = expand_range("A1", "B3")
        second = expand_range("A1", "B3")
        assert first == second
        assert len(first) == 6

    def test_reversed_rows_is_empty(self) -> None:
        """Endpoints are not normalized; a bottom-up range covers nothing."""
        assert expand_range("A3", "A1") == []

    def test_reversed_columns_is_empty(self) -> None:
        assert expand_range("C1", "A1") == []


class TestSplitArgument:
    def test_range(self) -> None:
        assert _names(split_argument("A1:A3")) == ["A1", "A2", "A3"]

    def test_range_extra_parts_ignored(self) -> None:
        assert _names(split_argument("A1:A2:A9")) == ["A1", "A2"]

    def test_list(self) -> None:
        assert _names(split_argument("A1, B2 ,C3")) == ["A1", "B2", "C3"]

    def test_single(self) -> None:
        assert _names(split_argument("D4")) == ["D4"]

    def test_reversed_range_raises(self) -> None:
        with pytest.raises(EmptyRangeError):
            split_argument("A3:A1")

    def test_empty_argument(self) -> None:
        with pytest.raises(ReferenceParseError):
            split_argument("")

    def test_bad_list_member(self) -> None:
        with pytest.raises(ReferenceParseError):
            split_argument("A1,,B2")
