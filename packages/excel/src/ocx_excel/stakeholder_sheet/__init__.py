"""Capitalization-by-stakeholder sheet.

The sheet is a banner followed by one left-to-right table. Columns are
written in order and never address cells directly: roll-up columns build
their formulas from the Extents the earlier columns report back.
"""

import logging
from typing import List, Optional

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ocx_domain.schemas import StakeholderSheetCFG, StockClass, StockPlan

from ..extents import Extent, ExtentsCollection
from ..interfaces import CapitalizationModel
from ..range_printer import WorksheetRangePrinter
from ..styles import SheetStyles
from .headers import CapitalizationByStakeholderHeader
from .holdings_columns import (
    FullyDilutedShares,
    StakeholderColumn,
    StakeholderGroupColumn,
    StockClassAsConvertedColumn,
    StockClassOutstandingColumn,
    StockPlanColumn,
    TotalAsConverted,
    TotalOutstanding,
    as_converted_heading,
    outstanding_heading,
)

logger = logging.getLogger(__name__)

FULLY_DILUTED_FOOTNOTE = (
    "** Fully diluted shares count preferred stock as converted, "
    "plus stock plan grants and options remaining for issuance."
)

STAKEHOLDER_COLUMN_WIDTH = 32
GROUP_COLUMN_WIDTH = 18
SHARE_COLUMN_WIDTH = 16


class StakeholderSheet:
    """Renders a capitalization model onto a worksheet on construction."""

    def __init__(
        self,
        worksheet: Worksheet,
        model: CapitalizationModel,
        config: Optional[StakeholderSheetCFG] = None,
    ):
        self.worksheet = worksheet
        self.model = model
        self.config = config or StakeholderSheetCFG()
        self.styles = SheetStyles(self.config)
        self.sheet = WorksheetRangePrinter.create(worksheet, "top-to-bottom")
        self.table_extent: Optional[Extent] = None

        self._create_capitalization_by_stakeholder_table()

    def _create_capitalization_by_stakeholder_table(self) -> None:
        model = self.model
        stakeholders = model.stakeholders or []
        leading_columns = 2 if self.config.show_stakeholder_group else 1

        CapitalizationByStakeholderHeader(
            self.sheet, self.styles, date_format=self.config.date_format
        ).write(
            model.issuer_name,
            len(self._stock_columns()),
            as_of_date=model.as_of_date,
            leading_columns=leading_columns,
        )

        holdings_table = self.sheet.create_nested_range("left-to-right")
        holdings_table.next_row(height=self.config.header_row_height)

        StakeholderColumn.as_child_of(holdings_table, self.styles).write(stakeholders)
        if self.config.show_stakeholder_group:
            StakeholderGroupColumn.as_child_of(holdings_table, self.styles).write(stakeholders)

        outstanding = ExtentsCollection()
        as_converted = ExtentsCollection()
        fully_diluted = ExtentsCollection()

        for stock_class in self._stock_classes:
            outstanding_range = StockClassOutstandingColumn.as_child_of(
                holdings_table, self.styles
            ).write(stock_class, model)
            outstanding.push(outstanding_range.get_extents())

            if self._converts(stock_class):
                converted_range = StockClassAsConvertedColumn.as_child_of(
                    holdings_table, self.styles
                ).write(stock_class, outstanding_range, model)
                as_converted.push(converted_range.get_extents())
                fully_diluted.push(converted_range.get_extents())
            else:
                as_converted.push(outstanding_range.get_extents())
                fully_diluted.push(outstanding_range.get_extents())

        plan_columns = StockPlanColumn.as_child_of(holdings_table, self.styles)
        for stock_plan in self._stock_plans:
            fully_diluted.push(plan_columns.write(stock_plan, model).get_extents())

        row_count = len(stakeholders)
        TotalOutstanding.as_child_of(holdings_table, self.styles).write(outstanding, row_count=row_count)
        TotalAsConverted.as_child_of(holdings_table, self.styles).write(as_converted, row_count=row_count)
        FullyDilutedShares.as_child_of(holdings_table, self.styles).write(
            fully_diluted,
            options_remaining=plan_columns.options_remaining,
            row_count=row_count,
        )

        self.table_extent = holdings_table.complete()

        self.sheet.next_row()
        self.sheet.next_row().add_cell(FULLY_DILUTED_FOOTNOTE, self.styles.section_label)
        self.sheet.complete()

        self._format_columns(leading_columns)
        logger.debug(
            f"Stakeholder sheet table at {self.table_extent}: "
            f"{row_count} stakeholders, {len(outstanding)} stock classes, "
            f"{len(self._stock_plans)} stock plans"
        )

    def _format_columns(self, leading_columns: int) -> None:
        if self.table_extent is None:
            return

        extent = self.table_extent
        for col in range(extent.col_start, extent.col_end + 1):
            offset = col - extent.col_start
            if offset == 0:
                width = STAKEHOLDER_COLUMN_WIDTH
            elif offset < leading_columns:
                width = GROUP_COLUMN_WIDTH
            else:
                width = SHARE_COLUMN_WIDTH
            self.worksheet.column_dimensions[get_column_letter(col)].width = width

        if self.config.freeze_header:
            # Below the table header, right of the stakeholder names
            self.worksheet.freeze_panes = self.worksheet.cell(
                row=extent.row_start + 1, column=extent.col_start + 1
            )

    def _converts(self, stock_class: StockClass) -> bool:
        return bool(stock_class.is_preferred) and self.model.get_stock_class_conversion_ratio(stock_class) != 1.0

    def _stock_columns(self) -> List[str]:
        """Headings of the outstanding and as-converted stock class columns."""
        headings = []
        for stock_class in self._stock_classes:
            headings.append(outstanding_heading(stock_class))
            if self._converts(stock_class):
                headings.append(as_converted_heading(stock_class))
        return headings

    @property
    def _stock_classes(self) -> List[StockClass]:
        return self.model.stock_classes or []

    @property
    def _stock_plans(self) -> List[StockPlan]:
        return self.model.stock_plans or []


__all__ = [
    "StakeholderSheet",
    "CapitalizationByStakeholderHeader",
    "FULLY_DILUTED_FOOTNOTE",
]
