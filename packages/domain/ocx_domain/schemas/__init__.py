"""OCX domain schemas.

This package contains all Pydantic models for the domain layer:
- Base types and conventions
- OCF records (decoded input)
- Capitalization entities (stakeholders, stock classes, stock plans)
- Workbook configuration

Usage:
    from ocx_domain.schemas import (
        decode_record, StockClassRecord, Stakeholder, StockClass, WorkbookCFG
    )
"""

# Base types
from .base import (
    DomainModel,
    OcfRecord,
    ShareCount,
    StakeholderId,
    StockClassId,
    StockPlanId,
    SecurityId,
)

# OCF records
from .records import (
    Record,
    IssuerRecord,
    StakeholderRecord,
    StakeholderName,
    StockClassRecord,
    ConversionRight,
    ConversionMechanism,
    Ratio,
    StockPlanRecord,
    StockPlanPoolAdjustmentRecord,
    SecurityTransactionRecord,
    StockTransactionRecord,
    PlanSecurityTransactionRecord,
    decode_record,
    record_tag,
)

# Capitalization entities
from .capitalization import (
    RoundingType,
    Stakeholder,
    StockClass,
    StockPlan,
)

# Workbook
from .workbook import (
    WorkbookCFG,
    StakeholderSheetCFG,
)

__all__ = [
    # Base types
    "DomainModel",
    "OcfRecord",
    "ShareCount",
    "StakeholderId",
    "StockClassId",
    "StockPlanId",
    "SecurityId",
    # OCF records
    "Record",
    "IssuerRecord",
    "StakeholderRecord",
    "StakeholderName",
    "StockClassRecord",
    "ConversionRight",
    "ConversionMechanism",
    "Ratio",
    "StockPlanRecord",
    "StockPlanPoolAdjustmentRecord",
    "SecurityTransactionRecord",
    "StockTransactionRecord",
    "PlanSecurityTransactionRecord",
    "decode_record",
    "record_tag",
    # Capitalization entities
    "RoundingType",
    "Stakeholder",
    "StockClass",
    "StockPlan",
    # Workbook
    "WorkbookCFG",
    "StakeholderSheetCFG",
]
