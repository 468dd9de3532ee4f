"""Banner above the capitalization-by-stakeholder table."""

import logging
from datetime import date
from typing import Optional

from ..range_printer import WorksheetRangePrinter
from ..styles import SheetStyles

logger = logging.getLogger(__name__)

TITLE = "Capitalization by Stakeholder"
STOCK_BANNER = "Stock"


class CapitalizationByStakeholderHeader:
    """Writes the sheet title block and the banner over the stock columns.

    Layout (sheet rows):
        1  issuer name
        2  "Capitalization by Stakeholder"
        3  "As of <date>" (blank when the model has no as-of date)
        4  blank
        5  banner merged across the stock columns
    """

    def __init__(
        self,
        sheet: WorksheetRangePrinter,
        styles: Optional[SheetStyles] = None,
        date_format: str = "%B %d, %Y",
    ):
        self.sheet = sheet
        self.styles = styles or SheetStyles()
        self.date_format = date_format

    def write(
        self,
        issuer_name: str,
        stock_column_count: int,
        as_of_date: Optional[date] = None,
        leading_columns: int = 2,
    ) -> WorksheetRangePrinter:
        """Write the header block.

        Args:
            issuer_name: Company name for the first line
            stock_column_count: Number of stock columns the banner spans
            as_of_date: Date the cap table is reported as of
            leading_columns: Columns left of the stock columns (stakeholder, group)
        """
        with self.sheet.create_nested_range("top-to-bottom") as header:
            header.next_row().add_cell(issuer_name or "", self.styles.title, literal=True)
            header.next_row().add_cell(TITLE, self.styles.subtitle)

            header.next_row()
            if as_of_date is not None:
                header.add_cell(f"As of {as_of_date.strftime(self.date_format)}", self.styles.subtitle)

            header.next_row()
            header.next_row()
            if stock_column_count > 0:
                header.add_blank_cells(leading_columns)
                header.add_merged_cell(STOCK_BANNER, stock_column_count, self.styles.banner, literal=True)

        logger.debug(f"Wrote header for {issuer_name!r} spanning {stock_column_count} stock columns")
        return header
