"""Capitalization entities exposed to the report layer.

These are the model's own view of the cap table, derived from OCF records:
- Stakeholder: who holds securities
- StockClass: what kind of stock, how it converts, how conversions round
- StockPlan: equity incentive plan and its reserved pool

Report writers only ever see these types (plus the numbers the model
computes), never raw OCF records.
"""

from datetime import date
from decimal import Decimal
from typing import Literal, Optional
from pydantic import ConfigDict, Field, field_validator

from .base import DomainModel, StakeholderId, StockClassId, StockPlanId, ShareCount


RoundingType = Literal["NEAREST", "FLOOR", "CEILING"]

# OCF spells "round half up" as NORMAL
_OCF_ROUNDING_TYPES = {
    "NORMAL": "NEAREST",
    "NEAREST": "NEAREST",
    "FLOOR": "FLOOR",
    "CEILING": "CEILING",
}

_RELATIONSHIP_GROUPS = {
    "ADVISOR": "Advisor",
    "BOARD_MEMBER": "Board Member",
    "CONSULTANT": "Consultant",
    "EMPLOYEE": "Employee",
    "EX_ADVISOR": "Former Advisor",
    "EX_CONSULTANT": "Former Consultant",
    "EX_EMPLOYEE": "Former Employee",
    "EXECUTIVE": "Executive",
    "FOUNDER": "Founder",
    "INVESTOR": "Investor",
    "NON_US_EMPLOYEE": "Employee (Non-US)",
    "OFFICER": "Officer",
    "OTHER": "Other",
}


def stakeholder_group_label(
    current_relationship: Optional[str],
    stakeholder_type: Optional[str] = None,
) -> str:
    """Human label for the "Stakeholder Group" column.

    Unknown relationships are title-cased rather than dropped.
    """
    for value in (current_relationship, stakeholder_type):
        if value:
            return _RELATIONSHIP_GROUPS.get(value, value.replace("_", " ").title())
    return ""


def rounding_type_from_ocf(value: Optional[str]) -> RoundingType:
    if value is None:
        return "NEAREST"
    return _OCF_ROUNDING_TYPES.get(value.upper(), "NEAREST")


# =============================================================================
# Stakeholder
# =============================================================================

class Stakeholder(DomainModel):
    """A row of the stakeholder sheet.

    Duplicate ids are possible: the model keeps every STAKEHOLDER record it
    consumes, in order.
    """

    model_config = ConfigDict(frozen=True)

    id: StakeholderId
    display_name: str = Field(default=" - ")
    group: str = Field(default="", description="Relationship label, e.g. 'Founder'")


# =============================================================================
# Stock Class
# =============================================================================

class StockClass(DomainModel):
    """A stock class column group of the stakeholder sheet.

    Example:
        Series A Preferred converting 3 -> 4 common, rounding down:
            StockClass(
                id="series_a",
                display_name="Series A Preferred",
                is_preferred=True,
                conversion_ratio=1.3333333333333333,
                rounding_type="FLOOR",
            )
    """

    model_config = ConfigDict(frozen=True)

    id: StockClassId
    display_name: str
    is_preferred: bool = False
    conversion_ratio: float = Field(
        default=1.0,
        gt=0,
        description="Common shares per share of this class; 1 means no conversion"
    )
    board_approval_date: Optional[date] = None
    rounding_type: RoundingType = "NEAREST"

    @property
    def converts(self) -> bool:
        """True when the class gets its own as-converted column."""
        return self.is_preferred and self.conversion_ratio != 1.0


# =============================================================================
# Stock Plan
# =============================================================================

class StockPlan(DomainModel):
    """An equity incentive plan column of the stakeholder sheet."""

    model_config = ConfigDict(frozen=True)

    id: StockPlanId
    plan_name: str
    initial_shares_reserved: ShareCount = Decimal("0")
    board_approval_date: Optional[date] = None

    @field_validator("initial_shares_reserved")
    @classmethod
    def validate_reserved(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError(f"initial_shares_reserved must be non-negative, got {value}")
        return value
