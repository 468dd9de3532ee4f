"""Spreadsheet rendering for OCX capitalization models."""

from .errors import RangeStateError
from .extents import Extent, ExtentsCollection
from .line_printer import WorksheetLinePrinter
from .range_printer import WorksheetRangePrinter
from .stakeholder_sheet import StakeholderSheet
from .writer import WorkbookWriter

__all__ = [
    "Extent",
    "ExtentsCollection",
    "RangeStateError",
    "StakeholderSheet",
    "WorkbookWriter",
    "WorksheetLinePrinter",
    "WorksheetRangePrinter",
]
