"""Shared fixtures for sheet writer tests."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

import pytest
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from ocx_domain import Model
from ocx_domain.schemas import Stakeholder, StockClass, StockPlan
from ocx_excel.extents import Extent, ExtentsCollection
from ocx_excel.range_printer import WorksheetRangePrinter


@dataclass
class PreparedWorksheet:
    """A blank worksheet with a left-to-right root range at A1."""

    worksheet: Worksheet
    parent_range: WorksheetRangePrinter

    def cell(self, ref: str):
        return self.worksheet[ref]

    @staticmethod
    def make_extents(*refs: str) -> ExtentsCollection:
        return ExtentsCollection([Extent.from_a1(ref) for ref in refs])


@pytest.fixture
def prepared_worksheet() -> PreparedWorksheet:
    worksheet = Workbook().active
    return PreparedWorksheet(
        worksheet=worksheet,
        parent_range=WorksheetRangePrinter.create(worksheet, "left-to-right"),
    )


@dataclass
class FakeModel:
    """Answers every holdings query with a fixed number."""

    stakeholders: List[Stakeholder] = field(default_factory=lambda: [
        Stakeholder(id="1", display_name="Stockholder 1"),
        Stakeholder(id="42", display_name="Optionholder 42"),
    ])
    stock_classes: List[StockClass] = field(default_factory=list)
    stock_plans: List[StockPlan] = field(default_factory=list)
    issuer_name: str = "Fred"
    as_of_date: Optional[date] = date(2024, 6, 30)
    holdings: int = 50
    plan_holdings: int = 50
    options_remaining: int = 100
    conversion_ratio: Optional[float] = None

    def get_stakeholder_stock_holdings(self, stakeholder, stock_class):
        return self.holdings

    def get_stock_class_conversion_ratio(self, stock_class):
        if self.conversion_ratio is not None:
            return self.conversion_ratio
        return stock_class.conversion_ratio

    def get_stakeholder_stock_plan_holdings(self, stakeholder, stock_plan):
        return self.plan_holdings

    def get_options_remaining_for_issuance(self, stock_plan):
        return self.options_remaining


@pytest.fixture
def fake_model() -> FakeModel:
    return FakeModel()


@pytest.fixture
def stock_plans() -> List[StockPlan]:
    return [
        StockPlan(id="a", plan_name="Stock Plan A", initial_shares_reserved=Decimal("200")),
        StockPlan(id="b", plan_name="Stock Plan B", initial_shares_reserved=Decimal("200")),
    ]


def build_acme_model() -> Model:
    """Acme Inc. as of 2024-06-30.

    Stakeholders: Joe (founder), Ann (investor)
    Stock classes: Common; Series A Preferred converting 2 -> 3, rounding down
    Stock plan: 2020 Plan, 1000 reserved, 100 granted to Joe
    """
    return Model(as_of_date=date(2024, 6, 30)).consume_all([
        {"object_type": "ISSUER", "legal_name": "Acme Holdings, Inc.", "dba": "Acme Inc."},
        {"object_type": "STAKEHOLDER", "id": "joe", "name": {"legal_name": "Joe"},
         "current_relationship": "FOUNDER"},
        {"object_type": "STAKEHOLDER", "id": "ann", "name": {"legal_name": "Ann"},
         "current_relationship": "INVESTOR"},
        {
            "object_type": "STOCK_CLASS",
            "id": "series_a",
            "name": "Series A",
            "class_type": "PREFERRED",
            "board_approval_date": "2023-01-15",
            "conversion_rights": [{
                "conversion_mechanism": {
                    "type": "RATIO_CONVERSION",
                    "ratio": {"numerator": "3", "denominator": "2"},
                    "rounding_type": "FLOOR",
                },
            }],
        },
        {"object_type": "STOCK_CLASS", "id": "common", "name": "Common", "class_type": "COMMON"},
        {"object_type": "STOCK_PLAN", "id": "plan", "plan_name": "2020 Plan",
         "initial_shares_reserved": "1000"},
        {"object_type": "TX_STOCK_ISSUANCE", "security_id": "CS-1", "stakeholder_id": "joe",
         "stock_class_id": "common", "quantity": "1000"},
        {"object_type": "TX_STOCK_ISSUANCE", "security_id": "PA-1", "stakeholder_id": "ann",
         "stock_class_id": "series_a", "quantity": "301"},
        {"object_type": "TX_EQUITY_COMPENSATION_ISSUANCE", "security_id": "OPT-1",
         "stakeholder_id": "joe", "stock_plan_id": "plan", "quantity": "100"},
    ])


@pytest.fixture
def acme_model() -> Model:
    return build_acme_model()

