"""Nested, directional ranges on top of the line printer.

A range flows either top-to-bottom (children stack under each other) or
left-to-right (children sit side by side). Each nested range has its own
cursor; when it completes it hands its Extent back to the parent, which moves
past it:

    sheet = WorksheetRangePrinter.create(worksheet, "top-to-bottom")
    sheet.next_row().add_cell("Acme Inc.")

    table = sheet.create_nested_range("left-to-right")
    with table.create_nested_range("top-to-bottom") as column:
        column.next_row().add_cell("Stakeholder")
        column.next_row().add_cell("Alice")
    with table.create_nested_range("top-to-bottom") as column:
        column.next_row().add_cell("Common")   # lands to the right of "Stakeholder"
        column.next_row().add_cell(100)
    table.complete()
"""

import logging
from typing import Any, Literal, Optional

from openpyxl.worksheet.worksheet import Worksheet

from .errors import RangeStateError
from .extents import Extent
from .line_printer import CellStyle, WorksheetLinePrinter, merge_styles

logger = logging.getLogger(__name__)

Orientation = Literal["top-to-bottom", "left-to-right"]
ORIENTATIONS = ("top-to-bottom", "left-to-right")


class WorksheetRangePrinter(WorksheetLinePrinter):
    """A line printer that can spawn nested ranges in a flow direction."""

    def __init__(
        self,
        worksheet: Worksheet,
        orientation: Orientation = "top-to-bottom",
        origin_row: int = 1,
        origin_col: int = 1,
        style: Optional[CellStyle] = None,
        parent: Optional["WorksheetRangePrinter"] = None,
    ):
        if orientation not in ORIENTATIONS:
            raise ValueError(f"Orientation must be one of {ORIENTATIONS}, got {orientation!r}")
        super().__init__(worksheet, origin_row=origin_row, origin_col=origin_col, style=style)
        self.orientation = orientation
        self.parent = parent
        self._open_child: Optional["WorksheetRangePrinter"] = None
        self._completed = False
        self._final_extent: Optional[Extent] = None

    @classmethod
    def create(
        cls,
        worksheet: Worksheet,
        orientation: Orientation = "top-to-bottom",
        style: Optional[CellStyle] = None,
    ) -> "WorksheetRangePrinter":
        """Create a root range anchored at A1."""
        return cls(worksheet, orientation=orientation, style=style)

    @property
    def completed(self) -> bool:
        return self._completed

    # ------------------------------------------------------------------ #
    # Nesting
    # ------------------------------------------------------------------ #

    def create_nested_range(
        self,
        orientation: Orientation = "top-to-bottom",
        style: Optional[CellStyle] = None,
    ) -> "WorksheetRangePrinter":
        """Open a child range at the next free slot in this range's flow.

        The child inherits this range's style, overridden by ``style``.
        """
        self._check_writable()

        if self.orientation == "top-to-bottom":
            origin_row = self.origin_row + self._rows_used
            origin_col = self.origin_col
        else:
            if not self._row_open:
                self.next_row()
            origin_row = self.current_row
            origin_col = self.current_col

        child = WorksheetRangePrinter(
            self.worksheet,
            orientation=orientation,
            origin_row=origin_row,
            origin_col=origin_col,
            style=merge_styles(self._current_style, style),
            parent=self,
        )
        self._open_child = child
        return child

    def complete(self) -> Optional[Extent]:
        """Close the range and report its Extent to the parent.

        Returns:
            The Extent written, or None if nothing was written.
        """
        if self._completed:
            return self._final_extent
        if self._open_child is not None:
            raise RangeStateError("Cannot complete a range while a nested range is still open")

        self._completed = True
        self._final_extent = self.extent
        if self.parent is not None:
            self.parent._child_completed(self)
        return self._final_extent

    def get_extents(self) -> Optional[Extent]:
        """Extent of everything written in this range."""
        if self._completed:
            return self._final_extent
        return self.extent

    def _child_completed(self, child: "WorksheetRangePrinter") -> None:
        if child is not self._open_child:
            raise RangeStateError("Completed range is not the open child of this range")
        self._open_child = None

        if self.orientation == "top-to-bottom":
            self._rows_used += child.rows_used
            self._row = self._rows_used
            self._row_open = False
            self._cols_used = max(self._cols_used, child.cols_used)
        else:
            self._rows_used = max(self._rows_used, self._row - 1 + child.rows_used)
            self._advance_cols(child.cols_used)

    # ------------------------------------------------------------------ #
    # Guards
    # ------------------------------------------------------------------ #

    def _check_writable(self) -> None:
        if self._completed:
            raise RangeStateError("Range is already complete")
        if self._open_child is not None:
            raise RangeStateError("A nested range is still open; complete it first")

    def __enter__(self) -> "WorksheetRangePrinter":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.complete()
