"""Rectangular cell regions produced by range printers.

Column writers never know where on the sheet they will land. Instead they
hand back the Extent they wrote, and later writers build formulas from it:

    outstanding = ExtentsCollection()
    outstanding.push(Extent.from_a1("C2:C3"))
    outstanding.push(Extent.from_a1("E2:E3"))
    outstanding.sum_formula(0)   # "=SUM(C2,E2)"
    outstanding.sum_formula(1)   # "=SUM(C3,E3)"
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from openpyxl.utils import get_column_letter
from openpyxl.utils.cell import range_boundaries


@dataclass(frozen=True)
class Extent:
    """1-based, inclusive rectangle of cells."""

    row_start: int
    row_end: int
    col_start: int
    col_end: int

    def __post_init__(self):
        if self.row_start < 1 or self.col_start < 1:
            raise ValueError(f"Extent must start at row/column 1 or later: {self}")
        if self.row_end < self.row_start or self.col_end < self.col_start:
            raise ValueError(f"Extent ends before it starts: {self}")

    @classmethod
    def from_a1(cls, ref: str) -> "Extent":
        """Parse an A1 range ("X2:X3") or single cell ("B7")."""
        min_col, min_row, max_col, max_row = range_boundaries(ref.replace("$", ""))
        if min_row is None or min_col is None:
            raise ValueError(f"Whole-row and whole-column ranges are not extents: {ref!r}")
        return cls(row_start=min_row, row_end=max_row, col_start=min_col, col_end=max_col)

    @property
    def row_count(self) -> int:
        return self.row_end - self.row_start + 1

    @property
    def col_count(self) -> int:
        return self.col_end - self.col_start + 1

    def cell_ref(self, row_offset: int = 0, col_offset: int = 0, absolute: bool = False) -> str:
        """A1 reference of a cell inside the extent, relative to its top-left corner."""
        row = self.row_start + row_offset
        col = self.col_start + col_offset
        if not (self.row_start <= row <= self.row_end and self.col_start <= col <= self.col_end):
            raise IndexError(f"Offset ({row_offset}, {col_offset}) is outside {self.to_a1()}")
        return _ref(row, col, absolute)

    def to_a1(self, absolute: bool = False) -> str:
        start = _ref(self.row_start, self.col_start, absolute)
        if self.row_count == 1 and self.col_count == 1:
            return start
        return f"{start}:{_ref(self.row_end, self.col_end, absolute)}"

    def column(self, col_offset: int = 0) -> "Extent":
        """Single-column projection of the extent."""
        col = self.col_start + col_offset
        return Extent(self.row_start, self.row_end, col, col)

    def row(self, row_offset: int = 0) -> "Extent":
        """Single-row projection of the extent."""
        row = self.row_start + row_offset
        return Extent(row, row, self.col_start, self.col_end)

    def __str__(self) -> str:
        return self.to_a1()


def _ref(row: int, col: int, absolute: bool) -> str:
    if absolute:
        return f"${get_column_letter(col)}${row}"
    return f"{get_column_letter(col)}{row}"


class ExtentsCollection:
    """Insertion-ordered extents that are summed row by row.

    Every member must cover the same number of rows; row ``i`` of the
    collection is the ``i``-th row of each member.
    """

    def __init__(self, extents: Optional[Sequence[Extent]] = None):
        self._extents: List[Extent] = []
        for extent in extents or ():
            self.push(extent)

    def push(self, extent: Optional[Extent]) -> "ExtentsCollection":
        # Ranges that wrote nothing report no extent
        if extent is not None:
            self._extents.append(extent)
        return self

    def __iter__(self) -> Iterator[Extent]:
        return iter(self._extents)

    def __len__(self) -> int:
        return len(self._extents)

    def __getitem__(self, index: int) -> Extent:
        return self._extents[index]

    def __repr__(self) -> str:
        return f"ExtentsCollection([{', '.join(e.to_a1() for e in self._extents)}])"

    @property
    def row_count(self) -> int:
        """Rows shared by every member (0 when empty)."""
        counts = {extent.row_count for extent in self._extents}
        if len(counts) > 1:
            raise ValueError(f"Extents cover different numbers of rows: {self!r}")
        return counts.pop() if counts else 0

    def row_refs(self, row_offset: int) -> List[str]:
        """References to every cell of row ``row_offset`` across all members."""
        return [
            extent.cell_ref(row_offset, col_offset)
            for extent in self._extents
            for col_offset in range(extent.col_count)
        ]

    def sum_formula(self, row_offset: int) -> str:
        return f"=SUM({','.join(self.row_refs(row_offset))})"
