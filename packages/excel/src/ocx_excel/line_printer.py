"""Line-printer abstraction over an openpyxl worksheet.

A line printer writes one cell after another, left to right, and starts a new
line with ``next_row``. Callers never address absolute coordinates:

    printer = WorksheetLinePrinter(worksheet)
    printer.next_row(height=30).add_cell("Stakeholder", header).add_cell("Group", header)
    printer.next_row().add_cell("Alice").add_blank_cell()

Styles are dicts of openpyxl cell style attributes (``font``, ``fill``,
``border``, ``alignment``, ``number_format``, ``protection``). The style of
the current range applies to every cell; a per-cell style overrides it key by
key.
"""

import logging
from typing import Any, Dict, Optional

from openpyxl.worksheet.worksheet import Worksheet

from .extents import Extent

logger = logging.getLogger(__name__)

CellStyle = Dict[str, Any]

STYLE_ATTRIBUTES = frozenset({
    "font",
    "fill",
    "border",
    "alignment",
    "number_format",
    "protection",
})


def merge_styles(*styles: Optional[CellStyle]) -> CellStyle:
    merged: CellStyle = {}
    for style in styles:
        if style:
            merged.update(style)
    return merged


class WorksheetLinePrinter:
    """Cursor-based cell writer anchored at ``(origin_row, origin_col)``.

    The cursor starts before the first line; ``add_cell`` opens one if needed.
    ``extent`` is the rectangle covered so far, including blank cells and
    blank lines.
    """

    def __init__(
        self,
        worksheet: Worksheet,
        origin_row: int = 1,
        origin_col: int = 1,
        style: Optional[CellStyle] = None,
    ):
        self.worksheet = worksheet
        self.origin_row = origin_row
        self.origin_col = origin_col
        self.range_name: Optional[str] = None

        self._current_style: CellStyle = dict(style or {})
        self._row = 0  # 1-based index of the current line, 0 = none yet
        self._col = 0  # cells written on the current line
        self._row_open = False
        self._rows_used = 0
        self._cols_used = 0

    # ------------------------------------------------------------------ #
    # Cursor
    # ------------------------------------------------------------------ #

    @property
    def current_row(self) -> int:
        """Absolute sheet row of the current line."""
        return self.origin_row + max(self._row, 1) - 1

    @property
    def current_col(self) -> int:
        """Absolute sheet column the next cell will be written to."""
        return self.origin_col + self._col

    @property
    def rows_used(self) -> int:
        return self._rows_used

    @property
    def cols_used(self) -> int:
        return self._cols_used

    @property
    def extent(self) -> Optional[Extent]:
        if self._rows_used == 0:
            return None
        return Extent(
            row_start=self.origin_row,
            row_end=self.origin_row + self._rows_used - 1,
            col_start=self.origin_col,
            col_end=self.origin_col + max(self._cols_used, 1) - 1,
        )

    # ------------------------------------------------------------------ #
    # Writing
    # ------------------------------------------------------------------ #

    def next_row(self, height: Optional[float] = None) -> "WorksheetLinePrinter":
        """Start a new line below everything written so far."""
        self._check_writable()
        self._row = self._rows_used + 1
        self._rows_used = self._row
        self._col = 0
        self._row_open = True

        if height:
            self.worksheet.row_dimensions[self.current_row].height = height
        return self

    def create_range(self, name: str, style: Optional[CellStyle] = None) -> "WorksheetLinePrinter":
        """Name the cells that follow and make ``style`` their default."""
        logger.debug(f"Range {name!r} at {self.current_row}:{self.current_col}")
        self.range_name = name
        self._current_style = dict(style or {})
        return self

    def add_cell(
        self,
        value: Any,
        style: Optional[CellStyle] = None,
        literal: bool = False,
    ) -> "WorksheetLinePrinter":
        """Write ``value`` at the cursor and move one column right.

        Strings starting with ``=`` are stored as formulas unless ``literal``
        is set; labels taken from OCF records must always be written literal.
        """
        self._check_writable()
        if not self._row_open:
            self.next_row()

        cell = self.worksheet.cell(row=self.current_row, column=self.current_col)
        cell.value = value
        if literal and isinstance(value, str):
            cell.data_type = "s"
        for attribute, setting in merge_styles(self._current_style, style).items():
            if attribute not in STYLE_ATTRIBUTES:
                raise ValueError(f"Unknown cell style attribute: {attribute!r}")
            setattr(cell, attribute, setting)

        self._advance_cols(1)
        return self

    def add_merged_cell(
        self,
        value: Any,
        span: int,
        style: Optional[CellStyle] = None,
        literal: bool = False,
    ) -> "WorksheetLinePrinter":
        """Write ``value`` across ``span`` merged cells."""
        if span < 1:
            raise ValueError(f"Merged cell span must be positive, got {span}")
        start_col = self.current_col if self._row_open else self.origin_col
        self.add_cell(value, style, literal)
        if span > 1:
            row = self.current_row
            self.worksheet.merge_cells(
                start_row=row,
                start_column=start_col,
                end_row=row,
                end_column=start_col + span - 1,
            )
            self._advance_cols(span - 1)
        return self

    def add_blank_cell(self) -> "WorksheetLinePrinter":
        return self.add_cell(None)

    def add_blank_cells(self, n: int) -> "WorksheetLinePrinter":
        for _ in range(n):
            self.add_blank_cell()
        return self

    def _advance_cols(self, n: int) -> None:
        self._col += n
        self._cols_used = max(self._cols_used, self._col)

    def _check_writable(self) -> None:
        """Hook for subclasses that can refuse writes."""
        pass
