"""Tests for the holdings table column writers.

Two stakeholders put the table rows at:
    1 header, 2-3 stakeholders, 5 options remaining, 7 total
"""

import pytest

from ocx_domain.schemas import StockClass
from ocx_excel.stakeholder_sheet.holdings_columns import (
    FullyDilutedShares,
    StakeholderColumn,
    StakeholderGroupColumn,
    StockClassAsConvertedColumn,
    StockClassOutstandingColumn,
    StockPlanColumn,
    TotalAsConverted,
    TotalOutstanding,
)


def converted_class(**overrides):
    fields = {"id": "a", "display_name": "Class A Preferred Stock Converted", "is_preferred": True}
    fields.update(overrides)
    return StockClass(**fields)


# =============================================================================
# Stakeholder Columns
# =============================================================================

def test_stakeholder_column(prepared_worksheet, fake_model):
    cell = prepared_worksheet.cell
    StakeholderColumn.as_child_of(prepared_worksheet.parent_range).write(fake_model.stakeholders)

    assert cell("A1").value == "Stakeholder"
    assert cell("A2").value == "Stockholder 1"
    assert cell("A3").value == "Optionholder 42"
    assert cell("A4").value is None
    assert cell("A5").value == "Options Remaining for Issuance"
    assert cell("A6").value is None
    assert cell("A7").value == "Total"


def test_stakeholder_group_column(prepared_worksheet, fake_model):
    cell = prepared_worksheet.cell
    stakeholders = [
        s.model_copy(update={"group": group})
        for s, group in zip(fake_model.stakeholders, ["Founder", "Employee"])
    ]
    StakeholderColumn.as_child_of(prepared_worksheet.parent_range).write(stakeholders)
    StakeholderGroupColumn.as_child_of(prepared_worksheet.parent_range).write(stakeholders)

    assert cell("B1").value == "Stakeholder Group"
    assert cell("B2").value == "Founder"
    assert cell("B3").value == "Employee"
    assert cell("B7").value is None


def test_stakeholder_column_returns_data_range(prepared_worksheet, fake_model):
    data = StakeholderColumn.as_child_of(prepared_worksheet.parent_range).write(fake_model.stakeholders)
    assert data.get_extents().to_a1() == "A2:A3"


# =============================================================================
# Stock Class Columns
# =============================================================================

class TestStockClassOutstandingColumn:
    def test_common_heading_and_values(self, prepared_worksheet, fake_model):
        cell = prepared_worksheet.cell
        common = StockClass(id="common", display_name="Class A Common Stock")
        StockClassOutstandingColumn.as_child_of(prepared_worksheet.parent_range).write(common, fake_model)

        assert cell("A1").value == "Class A Common Stock"
        assert cell("A2").value == 50
        assert cell("A3").value == 50
        assert cell("A7").value == "=SUM(A2:A3)"

    def test_preferred_heading_shows_ratio(self, prepared_worksheet, fake_model):
        cell = prepared_worksheet.cell
        preferred = StockClass(
            id="pref", display_name="Series A Preferred", is_preferred=True, conversion_ratio=4 / 3
        )
        StockClassOutstandingColumn.as_child_of(prepared_worksheet.parent_range).write(preferred, fake_model)

        assert cell("A1").value == "Series A Preferred\n(outstanding) (1.3333)"


class TestStockClassAsConvertedColumn:
    @pytest.mark.parametrize("rounding_type, formula", [
        ("NEAREST", "=ROUND(A2 * 0.7, 0)"),
        ("FLOOR", "=FLOOR(A2 * 0.7, 1)"),
        ("CEILING", "=CEILING(A2 * 0.7, 1)"),
    ])
    def test_rounding_type_for_as_converted_values(self, prepared_worksheet, fake_model, rounding_type, formula):
        cell = prepared_worksheet.cell
        fake_model.conversion_ratio = 0.7
        stock_class = converted_class(rounding_type=rounding_type)

        outstanding_printer = StockClassOutstandingColumn.as_child_of(prepared_worksheet.parent_range)
        converted_printer = StockClassAsConvertedColumn.as_child_of(prepared_worksheet.parent_range)
        outstanding_range = outstanding_printer.write(stock_class, fake_model)
        converted_printer.write(stock_class, outstanding_range, fake_model)

        assert cell("A2").value == 50
        assert cell("B2").value == formula
        assert cell("B3").value == formula.replace("A2", "A3")

    def test_heading_and_total(self, prepared_worksheet, fake_model):
        cell = prepared_worksheet.cell
        fake_model.conversion_ratio = 0.7
        stock_class = converted_class()

        outstanding_range = StockClassOutstandingColumn.as_child_of(
            prepared_worksheet.parent_range
        ).write(stock_class, fake_model)
        StockClassAsConvertedColumn.as_child_of(
            prepared_worksheet.parent_range
        ).write(stock_class, outstanding_range, fake_model)

        assert cell("B1").value == "Class A Preferred Stock Converted\n(as converted)"
        assert cell("B5").value is None
        assert cell("B7").value == "=SUM(B2:B3)"

    def test_whole_number_ratio(self, prepared_worksheet, fake_model):
        cell = prepared_worksheet.cell
        fake_model.conversion_ratio = 2.0
        stock_class = converted_class()

        outstanding_range = StockClassOutstandingColumn.as_child_of(
            prepared_worksheet.parent_range
        ).write(stock_class, fake_model)
        StockClassAsConvertedColumn.as_child_of(
            prepared_worksheet.parent_range
        ).write(stock_class, outstanding_range, fake_model)

        assert cell("B2").value == "=ROUND(A2 * 2, 0)"


# =============================================================================
# Stock Plan Columns
# =============================================================================

class TestStockPlanColumn:
    def write_plans(self, prepared_worksheet, fake_model, stock_plans, with_stakeholders=True):
        if with_stakeholders:
            StakeholderColumn.as_child_of(prepared_worksheet.parent_range).write(fake_model.stakeholders)
        printer = StockPlanColumn.as_child_of(prepared_worksheet.parent_range)
        for plan in stock_plans:
            printer.write(plan, fake_model)
        return printer

    def test_header(self, prepared_worksheet, fake_model, stock_plans):
        cell = prepared_worksheet.cell
        self.write_plans(prepared_worksheet, fake_model, stock_plans, with_stakeholders=False)

        assert cell("A1").value == "Stock Plan A"
        assert cell("B1").value == "Stock Plan B"

    def test_holdings_for_stakeholder(self, prepared_worksheet, fake_model, stock_plans):
        cell = prepared_worksheet.cell
        self.write_plans(prepared_worksheet, fake_model, stock_plans)

        assert cell("A1").value == "Stakeholder"
        assert cell("A2").value == "Stockholder 1"
        assert cell("A3").value == "Optionholder 42"
        assert cell("B1").value == "Stock Plan A"
        assert cell("B2").value == 50
        assert cell("B3").value == 50
        assert cell("C1").value == "Stock Plan B"
        assert cell("C2").value == 50
        assert cell("C3").value == 50
        assert cell("A7").value == "Total"
        assert cell("B7").value == "=SUM(B2:B3)"
        assert cell("C7").value == "=SUM(C2:C3)"

    def test_options_remaining_for_issuance(self, prepared_worksheet, fake_model, stock_plans):
        cell = prepared_worksheet.cell
        self.write_plans(prepared_worksheet, fake_model, stock_plans)

        assert cell("A5").value == "Options Remaining for Issuance"
        assert cell("A7").value == "Total"
        assert cell("B5").value == 100
        assert cell("B7").value == "=SUM(B2:B3)"
        assert cell("C5").value == 100
        assert cell("C7").value == "=SUM(C2:C3)"

    def test_collects_options_remaining_cells(self, prepared_worksheet, fake_model, stock_plans):
        printer = self.write_plans(prepared_worksheet, fake_model, stock_plans)
        assert [extent.to_a1() for extent in printer.options_remaining] == ["B5", "C5"]


# =============================================================================
# Roll-up Columns
# =============================================================================

class TestTotalOutstanding:
    def test_header(self, prepared_worksheet):
        TotalOutstanding.as_child_of(prepared_worksheet.parent_range).write(prepared_worksheet.make_extents())

        assert prepared_worksheet.cell("A1").value == "Total Stock\n(outstanding)"
        assert prepared_worksheet.cell("B1").value == "Total Stock %\n(outstanding)"


class TestTotalAsConverted:
    def test_header(self, prepared_worksheet):
        TotalAsConverted.as_child_of(prepared_worksheet.parent_range).write(prepared_worksheet.make_extents())

        assert prepared_worksheet.cell("A1").value == "Total Stock\n(as converted)"
        assert prepared_worksheet.cell("B1").value == "Total Stock %\n(as converted)"

    def test_formulas_when_there_are_stock_class_ranges(self, prepared_worksheet):
        cell = prepared_worksheet.cell
        sources = prepared_worksheet.make_extents("X2:X3", "Y2:Y3")
        TotalAsConverted.as_child_of(prepared_worksheet.parent_range).write(sources)

        assert cell("A2").value == "=SUM(X2,Y2)"
        assert cell("A3").value == "=SUM(X3,Y3)"
        assert cell("B2").value == "=A2 / $A$7"
        assert cell("B3").value == "=A3 / $A$7"

    def test_totals(self, prepared_worksheet):
        cell = prepared_worksheet.cell
        sources = prepared_worksheet.make_extents("X2:X3", "Y2:Y3")
        TotalAsConverted.as_child_of(prepared_worksheet.parent_range).write(sources)

        assert cell("A5").value is None
        assert cell("A7").value == "=SUM(A2:A3)"
        assert cell("B7").value == "=SUM(B2:B3)"

    def test_mismatched_sources_raise(self, prepared_worksheet):
        sources = prepared_worksheet.make_extents("X2:X3", "Y2:Y4")
        with pytest.raises(ValueError, match="different numbers of rows"):
            TotalAsConverted.as_child_of(prepared_worksheet.parent_range).write(sources)


class TestFullyDilutedShares:
    def test_header(self, prepared_worksheet):
        FullyDilutedShares.as_child_of(prepared_worksheet.parent_range).write(prepared_worksheet.make_extents())

        assert prepared_worksheet.cell("A1").value == "Fully Diluted Shares**"
        assert prepared_worksheet.cell("B1").value == "Fully Diluted %"

    def test_formulas(self, prepared_worksheet):
        cell = prepared_worksheet.cell
        sources = prepared_worksheet.make_extents("X2:X3", "Y2:Y3")
        FullyDilutedShares.as_child_of(prepared_worksheet.parent_range).write(sources)

        assert cell("A2").value == "=SUM(X2,Y2)"
        assert cell("A3").value == "=SUM(X3,Y3)"
        assert cell("B2").value == "=A2 / $A$7"
        assert cell("B3").value == "=A3 / $A$7"

    def test_options_remaining_are_included(self, prepared_worksheet):
        cell = prepared_worksheet.cell
        sources = prepared_worksheet.make_extents("X2:X3", "Y2:Y3")
        options = prepared_worksheet.make_extents("Y5", "Z5")
        FullyDilutedShares.as_child_of(prepared_worksheet.parent_range).write(sources, options_remaining=options)

        assert cell("A5").value == "=SUM(Y5,Z5)"
        assert cell("A7").value == "=SUM(A2:A3,A5)"
        assert cell("B5").value == "=A5 / $A$7"
        assert cell("B7").value == "=SUM(B2:B3,B5)"

    def test_row_count_without_sources(self, prepared_worksheet):
        cell = prepared_worksheet.cell
        FullyDilutedShares.as_child_of(prepared_worksheet.parent_range).write(
            prepared_worksheet.make_extents(), row_count=2
        )

        assert cell("A2").value == 0
        assert cell("A3").value == 0
        assert cell("A7").value == "=SUM(A2:A3)"
