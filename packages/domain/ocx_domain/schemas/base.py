"""Base classes and type system for OCX domain models.

This module provides the foundational types, validators, and base classes
used throughout the OCX schema system.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Optional
from pydantic import BaseModel, BeforeValidator, Field, ConfigDict

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all domain models.

    Provides common configuration for all Pydantic models in the domain layer:
    - Validation on assignment for runtime safety
    - Support for Decimal and date types
    - Enum value serialization
    """

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        use_enum_values=True,
        arbitrary_types_allowed=True,
    )


class OcfRecord(BaseModel):
    """Base class for decoded OCF records.

    OCF objects carry many fields the report never reads (comments,
    addresses, tax ids, ...). Those are tolerated and ignored so newer
    OCF versions keep decoding.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        arbitrary_types_allowed=True,
    )


# =============================================================================
# Validators
# =============================================================================

def _date_prefix(value: Any) -> Any:
    """Accept full ISO timestamps where OCF expects a date.

    Some producers write ``2022-07-14T00:00:00.000Z`` for date fields; only
    the calendar date is meaningful.
    """
    if isinstance(value, str) and len(value) > 10 and value[10] in ("T", " "):
        return value[:10]
    if value == "":
        return None
    return value


# =============================================================================
# Type Aliases - Numeric
# =============================================================================

ShareCount = Annotated[
    Decimal,
    Field(description="Number of shares (may be negative only as an intermediate result)")
]

OcfNumeric = Annotated[
    Decimal,
    Field(description="OCF Numeric: decimal string with arbitrary precision")
]

OcfDate = Annotated[
    Optional[date],
    BeforeValidator(_date_prefix),
    Field(description="OCF date (YYYY-MM-DD); timestamps are truncated"),
]


# =============================================================================
# ID Conventions
# =============================================================================
#
# OCF identifiers are opaque strings chosen by the producer (usually UUIDs).
# Unlike snake_case ids elsewhere, nothing about their shape is enforced:
#
#   - stakeholder ids:   "6c9f0e43-..." or "joe"
#   - stock class ids:   "common", "Series A"
#   - security ids:      "CS-1", "yup"
#
# =============================================================================

StakeholderId = Annotated[str, Field(description="OCF stakeholder identifier")]

StockClassId = Annotated[str, Field(description="OCF stock class identifier")]

StockPlanId = Annotated[str, Field(description="OCF stock plan identifier")]

SecurityId = Annotated[str, Field(description="OCF security identifier")]
