"""Column writers for the capitalization-by-stakeholder table.

Every writer appends top-to-bottom columns to a left-to-right table range and
shares one vertical layout, so that rows line up across the table. For N
stakeholders (table-relative rows):

    1          header
    2 .. N+1   one row per stakeholder
    N+2        blank
    N+3        options remaining for issuance
    N+4        blank
    N+5        total

Writers return the range holding the stakeholder rows; its Extent is what
later writers reference in formulas.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from ocx_domain.schemas import Stakeholder, StockClass, StockPlan

from ..extents import Extent, ExtentsCollection
from ..interfaces import CapitalizationModel
from ..line_printer import CellStyle
from ..range_printer import WorksheetRangePrinter
from ..styles import SheetStyles

logger = logging.getLogger(__name__)

STAKEHOLDER_HEADING = "Stakeholder"
STAKEHOLDER_GROUP_HEADING = "Stakeholder Group"
OPTIONS_REMAINING_LABEL = "Options Remaining for Issuance"
TOTAL_LABEL = "Total"

ROUNDING_FORMULAS = {
    "NEAREST": "=ROUND({ref} * {ratio}, 0)",
    "FLOOR": "=FLOOR({ref} * {ratio}, 1)",
    "CEILING": "=CEILING({ref} * {ratio}, 1)",
}


@dataclass
class WrittenColumn:
    """Where one column landed on the sheet."""

    column: WorksheetRangePrinter
    data: WorksheetRangePrinter
    options_cell: Extent
    total_cell: Extent


TotalValue = Union[None, str, Callable[[Optional[Extent], Optional[Extent]], Any]]


def sum_total(data: Optional[Extent], options_cell: Optional[Extent] = None) -> Any:
    """``=SUM(B2:B3)``, optionally with the options-remaining cell appended."""
    refs = [extent.to_a1() for extent in (data, options_cell) if extent is not None]
    if not refs:
        return 0
    return f"=SUM({','.join(refs)})"


def _sum_stakeholder_rows(data: Optional[Extent], options_cell: Optional[Extent]) -> Any:
    return sum_total(data)


def _sum_rows_and_options(data: Optional[Extent], options_cell: Optional[Extent]) -> Any:
    return sum_total(data, options_cell)


def number_text(value: Any) -> str:
    """Render a number the way it should appear inside a formula."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def outstanding_heading(stock_class: StockClass) -> str:
    if stock_class.is_preferred:
        return f"{stock_class.display_name}\n(outstanding) ({stock_class.conversion_ratio:.4f})"
    return stock_class.display_name


def as_converted_heading(stock_class: StockClass) -> str:
    return f"{stock_class.display_name}\n(as converted)"


# =============================================================================
# Base Writer
# =============================================================================

class HoldingsColumn:
    """Base class for writers appending columns to the holdings table."""

    def __init__(self, parent: WorksheetRangePrinter, styles: Optional[SheetStyles] = None):
        self.parent = parent
        self.styles = styles or SheetStyles()

    @classmethod
    def as_child_of(cls, parent: WorksheetRangePrinter, styles: Optional[SheetStyles] = None):
        return cls(parent, styles)

    def _write_column(
        self,
        heading: str,
        values: Iterable[Any],
        value_style: Optional[CellStyle] = None,
        options_value: Any = None,
        options_style: Optional[CellStyle] = None,
        total: TotalValue = _sum_stakeholder_rows,
        total_style: Optional[CellStyle] = None,
        literal_values: bool = False,
    ) -> WrittenColumn:
        # Headings and, with literal_values, data cells may carry OCF names
        with self.parent.create_nested_range("top-to-bottom") as column:
            column.next_row().add_cell(heading, self.styles.header, literal=True)

            with column.create_nested_range("top-to-bottom") as data:
                for value in values:
                    data.next_row().add_cell(value, value_style, literal_values)

            column.next_row()
            column.next_row()
            options_cell = _cell_at(column)
            if options_value is not None:
                column.add_cell(options_value, options_style)

            column.next_row()
            column.next_row()
            total_cell = _cell_at(column)
            total_value = total(data.get_extents(), options_cell) if callable(total) else total
            if total_value is not None:
                column.add_cell(total_value, total_style or self.styles.total_shares)

        logger.debug(f"Wrote column {heading!r} at {column.get_extents()}")
        return WrittenColumn(column=column, data=data, options_cell=options_cell, total_cell=total_cell)


def _cell_at(printer: WorksheetRangePrinter) -> Extent:
    return Extent(printer.current_row, printer.current_row, printer.current_col, printer.current_col)


# =============================================================================
# Stakeholder Columns
# =============================================================================

class StakeholderColumn(HoldingsColumn):
    """Stakeholder names plus the labels of the footer rows."""

    def write(self, stakeholders: Sequence[Stakeholder]) -> WorksheetRangePrinter:
        written = self._write_column(
            STAKEHOLDER_HEADING,
            (stakeholder.display_name for stakeholder in stakeholders),
            value_style=self.styles.label,
            options_value=OPTIONS_REMAINING_LABEL,
            options_style=self.styles.section_label,
            total=TOTAL_LABEL,
            total_style=self.styles.total_label,
            literal_values=True,
        )
        return written.data


class StakeholderGroupColumn(HoldingsColumn):
    """Relationship of each stakeholder to the issuer (Founder, Investor, ...)."""

    def write(self, stakeholders: Sequence[Stakeholder]) -> WorksheetRangePrinter:
        written = self._write_column(
            STAKEHOLDER_GROUP_HEADING,
            (getattr(stakeholder, "group", "") for stakeholder in stakeholders),
            value_style=self.styles.label,
            total=None,
            literal_values=True,
        )
        return written.data


# =============================================================================
# Stock Class Columns
# =============================================================================

class StockClassOutstandingColumn(HoldingsColumn):
    """Outstanding shares per stakeholder, looked up from the model."""

    def write(self, stock_class: StockClass, model: CapitalizationModel) -> WorksheetRangePrinter:
        written = self._write_column(
            outstanding_heading(stock_class),
            (
                model.get_stakeholder_stock_holdings(stakeholder, stock_class)
                for stakeholder in model.stakeholders
            ),
            value_style=self.styles.shares,
        )
        return written.data


class StockClassAsConvertedColumn(HoldingsColumn):
    """Outstanding shares converted to common, rounded per the class's policy.

    Example:
        Outstanding 50 in A2, ratio 0.7:
            NEAREST -> =ROUND(A2 * 0.7, 0)
            FLOOR   -> =FLOOR(A2 * 0.7, 1)
            CEILING -> =CEILING(A2 * 0.7, 1)
    """

    def write(
        self,
        stock_class: StockClass,
        outstanding_range: WorksheetRangePrinter,
        model: CapitalizationModel,
    ) -> WorksheetRangePrinter:
        ratio = number_text(model.get_stock_class_conversion_ratio(stock_class))
        template = ROUNDING_FORMULAS.get(
            getattr(stock_class, "rounding_type", None) or "NEAREST",
            ROUNDING_FORMULAS["NEAREST"],
        )
        source = outstanding_range.get_extents()
        rows = source.row_count if source is not None else 0

        written = self._write_column(
            as_converted_heading(stock_class),
            (template.format(ref=source.cell_ref(row), ratio=ratio) for row in range(rows)),
            value_style=self.styles.shares_formula,
        )
        return written.data


# =============================================================================
# Stock Plan Columns
# =============================================================================

class StockPlanColumn(HoldingsColumn):
    """Plan grants per stakeholder and the options left in the pool.

    One instance can write several plans; ``options_remaining`` collects the
    options-remaining cell of each so fully diluted totals can include them.
    """

    def __init__(self, parent: WorksheetRangePrinter, styles: Optional[SheetStyles] = None):
        super().__init__(parent, styles)
        self.options_remaining = ExtentsCollection()

    def write(self, stock_plan: StockPlan, model: CapitalizationModel) -> WorksheetRangePrinter:
        written = self._write_column(
            stock_plan.plan_name,
            (
                model.get_stakeholder_stock_plan_holdings(stakeholder, stock_plan)
                for stakeholder in model.stakeholders
            ),
            value_style=self.styles.shares,
            options_value=model.get_options_remaining_for_issuance(stock_plan),
            options_style=self.styles.shares,
        )
        self.options_remaining.push(written.options_cell)
        return written.data


# =============================================================================
# Roll-up Columns
# =============================================================================

class _RollupColumns(HoldingsColumn):
    """A row-wise SUM column over source extents plus its percentage column."""

    heading = ""
    percent_heading = ""

    def write(
        self,
        sources: ExtentsCollection,
        options_remaining: Optional[ExtentsCollection] = None,
        row_count: Optional[int] = None,
    ) -> WorksheetRangePrinter:
        """Write the roll-up and percentage columns.

        Args:
            sources: Extents summed row by row
            options_remaining: Options-remaining cells summed on the options row
            row_count: Stakeholder rows, when ``sources`` is empty

        Returns:
            Range holding the roll-up's stakeholder rows
        """
        rows = sources.row_count if len(sources) else (row_count or 0)
        include_options = options_remaining is not None and len(options_remaining) > 0

        totals = self._write_column(
            self.heading,
            (sources.sum_formula(row) if len(sources) else 0 for row in range(rows)),
            value_style=self.styles.shares_formula,
            options_value=options_remaining.sum_formula(0) if include_options else None,
            options_style=self.styles.shares_formula,
            total=_sum_rows_and_options if include_options else _sum_stakeholder_rows,
        )

        grand_total = totals.total_cell.cell_ref(absolute=True)
        data = totals.data.get_extents()
        self._write_column(
            self.percent_heading,
            (f"={data.cell_ref(row)} / {grand_total}" for row in range(rows)),
            value_style=self.styles.percent,
            options_value=f"={totals.options_cell.to_a1()} / {grand_total}" if include_options else None,
            options_style=self.styles.percent,
            total=_sum_rows_and_options if include_options else _sum_stakeholder_rows,
            total_style=self.styles.total_percent,
        )
        return totals.data


class TotalOutstanding(_RollupColumns):
    heading = "Total Stock\n(outstanding)"
    percent_heading = "Total Stock %\n(outstanding)"


class TotalAsConverted(_RollupColumns):
    heading = "Total Stock\n(as converted)"
    percent_heading = "Total Stock %\n(as converted)"


class FullyDilutedShares(_RollupColumns):
    heading = "Fully Diluted Shares**"
    percent_heading = "Fully Diluted %"


__all__: List[str] = [
    "HoldingsColumn",
    "StakeholderColumn",
    "StakeholderGroupColumn",
    "StockClassOutstandingColumn",
    "StockClassAsConvertedColumn",
    "StockPlanColumn",
    "TotalOutstanding",
    "TotalAsConverted",
    "FullyDilutedShares",
    "OPTIONS_REMAINING_LABEL",
    "TOTAL_LABEL",
]
