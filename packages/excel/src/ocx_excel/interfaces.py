"""What the sheet writers need from a capitalization model.

``ocx_domain.Model`` satisfies this protocol; tests substitute small fakes.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Protocol, Union

from ocx_domain.schemas import Stakeholder, StockClass, StockPlan

Number = Union[int, float, Decimal]


class CapitalizationModel(Protocol):
    issuer_name: str

    @property
    def as_of_date(self) -> Optional[date]: ...

    @property
    def stakeholders(self) -> List[Stakeholder]: ...

    @property
    def stock_classes(self) -> List[StockClass]: ...

    @property
    def stock_plans(self) -> List[StockPlan]: ...

    def get_stakeholder_stock_holdings(self, stakeholder: Stakeholder, stock_class: StockClass) -> Number: ...

    def get_stock_class_conversion_ratio(self, stock_class: StockClass) -> float: ...

    def get_stakeholder_stock_plan_holdings(self, stakeholder: Stakeholder, stock_plan: StockPlan) -> Number: ...

    def get_options_remaining_for_issuance(self, stock_plan: StockPlan) -> Number: ...
