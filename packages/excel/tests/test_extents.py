"""Tests for Extent and ExtentsCollection."""

import pytest

from ocx_excel.extents import Extent, ExtentsCollection


# =============================================================================
# Extent
# =============================================================================

def test_from_a1_range():
    extent = Extent.from_a1("X2:X3")
    assert extent == Extent(row_start=2, row_end=3, col_start=24, col_end=24)
    assert extent.row_count == 2
    assert extent.col_count == 1


def test_from_a1_single_cell():
    extent = Extent.from_a1("$B$7")
    assert extent == Extent(7, 7, 2, 2)
    assert extent.to_a1() == "B7"


def test_to_a1():
    extent = Extent(2, 3, 1, 2)
    assert extent.to_a1() == "A2:B3"
    assert extent.to_a1(absolute=True) == "$A$2:$B$3"
    assert str(extent) == "A2:B3"


def test_cell_ref():
    extent = Extent.from_a1("C2:D5")
    assert extent.cell_ref() == "C2"
    assert extent.cell_ref(3, 1) == "D5"
    assert extent.cell_ref(3, 0, absolute=True) == "$C$5"


def test_cell_ref_outside_extent():
    with pytest.raises(IndexError, match="outside C2:C3"):
        Extent.from_a1("C2:C3").cell_ref(2)


def test_projections():
    extent = Extent.from_a1("B2:D4")
    assert extent.column(1).to_a1() == "C2:C4"
    assert extent.row(2).to_a1() == "B4:D4"


@pytest.mark.parametrize("bounds", [
    (0, 1, 1, 1),
    (1, 1, 0, 1),
    (3, 2, 1, 1),
    (1, 1, 2, 1),
])
def test_invalid_extents(bounds):
    with pytest.raises(ValueError):
        Extent(*bounds)


def test_whole_column_is_not_an_extent():
    with pytest.raises(ValueError):
        Extent.from_a1("A:A")


# =============================================================================
# ExtentsCollection
# =============================================================================

def test_sum_formula():
    collection = ExtentsCollection([Extent.from_a1("X2:X3"), Extent.from_a1("Y2:Y3")])
    assert collection.sum_formula(0) == "=SUM(X2,Y2)"
    assert collection.sum_formula(1) == "=SUM(X3,Y3)"


def test_row_refs_span_multi_column_members():
    collection = ExtentsCollection([Extent.from_a1("B2:C3"), Extent.from_a1("E2:E3")])
    assert collection.row_refs(1) == ["B3", "C3", "E3"]


def test_push_ignores_missing_extents():
    collection = ExtentsCollection()
    collection.push(None).push(Extent.from_a1("A1:A2"))
    assert len(collection) == 1
    assert collection[0].to_a1() == "A1:A2"


def test_row_count():
    assert ExtentsCollection().row_count == 0
    assert ExtentsCollection([Extent.from_a1("A2:A4"), Extent.from_a1("C2:C4")]).row_count == 3


def test_row_count_mismatch():
    collection = ExtentsCollection([Extent.from_a1("A2:A4"), Extent.from_a1("C2:C3")])
    with pytest.raises(ValueError, match="different numbers of rows"):
        collection.row_count
