"""OCF record variants consumed by the capitalization model.

OCF objects reach this package already parsed into mappings (reading and
validating OCF files is someone else's job). They are decoded exactly once,
here, into a closed set of typed records:

    ISSUER                          -> IssuerRecord
    STAKEHOLDER                     -> StakeholderRecord
    STOCK_CLASS                     -> StockClassRecord
    STOCK_PLAN                      -> StockPlanRecord
    TX_STOCK_PLAN_POOL_ADJUSTMENT   -> StockPlanPoolAdjustmentRecord
    TX_STOCK_*                      -> StockTransactionRecord
    TX_PLAN_SECURITY_*              -> PlanSecurityTransactionRecord
    TX_EQUITY_COMPENSATION_*        -> PlanSecurityTransactionRecord

Anything else decodes to ``None`` so that new OCF object kinds never abort
processing.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Annotated, Any, List, Literal, Optional, Union
from pydantic import (
    BeforeValidator,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
    model_validator,
)

from .base import (
    OcfRecord,
    OcfDate,
    OcfNumeric,
    SecurityId,
    StakeholderId,
    StockClassId,
    StockPlanId,
)


STOCK_TRANSACTION_PREFIX = "TX_STOCK_"
PLAN_SECURITY_PREFIXES = ("TX_PLAN_SECURITY_", "TX_EQUITY_COMPENSATION_")
POOL_ADJUSTMENT_TYPE = "TX_STOCK_PLAN_POOL_ADJUSTMENT"


def _as_text(value: Any) -> Any:
    # Ratio parts are decimal strings; numbers are stringified so that
    # malformed values reach the calculator instead of failing here.
    if value is None or isinstance(value, str):
        return value
    return str(value)


RatioPart = Annotated[str, BeforeValidator(_as_text)]


# =============================================================================
# Issuer
# =============================================================================

class IssuerRecord(OcfRecord):
    """The company whose capitalization is described."""

    object_type: Literal["ISSUER"] = "ISSUER"
    id: Optional[str] = None
    legal_name: Optional[str] = None
    dba: Optional[str] = None


# =============================================================================
# Stakeholder
# =============================================================================

class StakeholderName(OcfRecord):
    legal_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class StakeholderRecord(OcfRecord):
    """A person or entity holding (or eligible to hold) securities."""

    object_type: Literal["STAKEHOLDER"] = "STAKEHOLDER"
    id: StakeholderId
    name: Optional[StakeholderName] = None
    stakeholder_type: Optional[str] = Field(
        default=None,
        description="INDIVIDUAL or INSTITUTION"
    )
    current_relationship: Optional[str] = Field(
        default=None,
        description="FOUNDER, EMPLOYEE, INVESTOR, ADVISOR, ..."
    )


# =============================================================================
# Stock Class
# =============================================================================

class Ratio(OcfRecord):
    """A conversion ratio expressed as two decimal strings.

    Example:
        Ratio(numerator="4", denominator="3") - 3 preferred shares become
        4 common shares.
    """

    numerator: RatioPart
    denominator: RatioPart


class ConversionMechanism(OcfRecord):
    """How a conversion right converts.

    Only ``RATIO_CONVERSION`` mechanisms influence the report; other types
    (SAFE, note, fixed amount, ...) are decoded but treated as 1:1.
    """

    type: str
    ratio: Optional[Ratio] = None
    rounding_type: Optional[str] = Field(
        default=None,
        description="OCF rounding type: NORMAL, FLOOR or CEILING"
    )


class ConversionRight(OcfRecord):
    conversion_mechanism: Optional[ConversionMechanism] = None
    converts_to_stock_class_id: Optional[StockClassId] = None


class StockClassRecord(OcfRecord):
    """A class of stock (common or preferred)."""

    object_type: Literal["STOCK_CLASS"] = "STOCK_CLASS"
    id: StockClassId
    name: str
    class_type: str = Field(description="COMMON or PREFERRED")
    board_approval_date: OcfDate = None
    conversion_rights: List[ConversionRight] = Field(default_factory=list)

    @field_validator("conversion_rights", mode="before")
    @classmethod
    def coerce_conversion_rights(cls, value: Any) -> Any:
        """Older producers emit a single conversion right object instead of a list."""
        if value is None:
            return []
        if isinstance(value, Mapping):
            return [value]
        return value

    @property
    def first_conversion_mechanism(self) -> Optional[ConversionMechanism]:
        if not self.conversion_rights:
            return None
        return self.conversion_rights[0].conversion_mechanism


# =============================================================================
# Stock Plan
# =============================================================================

class StockPlanRecord(OcfRecord):
    """An equity incentive plan with a reserved pool of shares."""

    object_type: Literal["STOCK_PLAN"] = "STOCK_PLAN"
    id: StockPlanId
    plan_name: str
    board_approval_date: OcfDate = None
    initial_shares_reserved: Optional[OcfNumeric] = None
    current_shares_reserved: Optional[OcfNumeric] = None

    @property
    def shares_reserved(self) -> Decimal:
        if self.current_shares_reserved is not None:
            return self.current_shares_reserved
        if self.initial_shares_reserved is not None:
            return self.initial_shares_reserved
        return Decimal("0")


class StockPlanPoolAdjustmentRecord(OcfRecord):
    """Changes the number of shares reserved for a stock plan."""

    object_type: Literal["TX_STOCK_PLAN_POOL_ADJUSTMENT"] = POOL_ADJUSTMENT_TYPE
    id: Optional[str] = None
    date: OcfDate = None
    stock_plan_id: StockPlanId
    shares_reserved: OcfNumeric


# =============================================================================
# Security Transactions
# =============================================================================

class SecurityTransactionRecord(OcfRecord):
    """Common shape of transactions recorded against a single security.

    ``kind`` is the object type without its family prefix, e.g.
    ``TX_STOCK_CANCELLATION`` -> ``CANCELLATION``. Calculators key off the
    kind so stock and plan security transactions share replay rules.
    """

    object_type: str
    id: Optional[str] = None
    date: OcfDate = None
    security_id: Optional[SecurityId] = None
    stakeholder_id: Optional[StakeholderId] = None
    quantity: Optional[OcfNumeric] = None
    quantity_converted: Optional[OcfNumeric] = None

    @property
    def kind(self) -> str:
        for prefix in (STOCK_TRANSACTION_PREFIX, *PLAN_SECURITY_PREFIXES):
            if self.object_type.startswith(prefix):
                return self.object_type[len(prefix):]
        return self.object_type

    @property
    def is_issuance(self) -> bool:
        return self.kind == "ISSUANCE"

    @model_validator(mode="after")
    def validate_issuance(self):
        """Issuances define securities, so they must say which and to whom."""
        if self.is_issuance:
            missing = [
                name for name in ("security_id", "stakeholder_id", "quantity")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(
                    f"{self.object_type} requires {', '.join(missing)}"
                )
        return self


class StockTransactionRecord(SecurityTransactionRecord):
    """Any ``TX_STOCK_*`` transaction."""

    stock_class_id: Optional[StockClassId] = None

    @field_validator("object_type")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        if not value.startswith(STOCK_TRANSACTION_PREFIX):
            raise ValueError(f"Not a stock transaction: {value}")
        return value

    @model_validator(mode="after")
    def validate_stock_class(self):
        if self.is_issuance and self.stock_class_id is None:
            raise ValueError(f"{self.object_type} requires stock_class_id")
        return self


class PlanSecurityTransactionRecord(SecurityTransactionRecord):
    """Any ``TX_PLAN_SECURITY_*`` or ``TX_EQUITY_COMPENSATION_*`` transaction.

    Issuances outside of a plan carry no ``stock_plan_id``; they are kept in
    the transaction log but never show up in a plan column.
    """

    stock_plan_id: Optional[StockPlanId] = None
    stock_class_id: Optional[StockClassId] = None

    @field_validator("object_type")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        if not value.startswith(PLAN_SECURITY_PREFIXES):
            raise ValueError(f"Not a plan security transaction: {value}")
        return value


# =============================================================================
# Discriminated Union
# =============================================================================

def record_tag(value: Any) -> Optional[str]:
    """Map an ``object_type`` onto the tag of the record variant decoding it.

    Returns None for object types this package does not understand.
    """
    if isinstance(value, Mapping):
        object_type = value.get("object_type")
    else:
        object_type = getattr(value, "object_type", None)

    if not isinstance(object_type, str):
        return None
    if object_type in ("ISSUER", "STAKEHOLDER", "STOCK_CLASS", "STOCK_PLAN", POOL_ADJUSTMENT_TYPE):
        return object_type
    if object_type.startswith(STOCK_TRANSACTION_PREFIX):
        return "TX_STOCK"
    if object_type.startswith(PLAN_SECURITY_PREFIXES):
        return "TX_PLAN_SECURITY"
    return None


Record = Annotated[
    Union[
        Annotated[IssuerRecord, Tag("ISSUER")],
        Annotated[StakeholderRecord, Tag("STAKEHOLDER")],
        Annotated[StockClassRecord, Tag("STOCK_CLASS")],
        Annotated[StockPlanRecord, Tag("STOCK_PLAN")],
        Annotated[StockPlanPoolAdjustmentRecord, Tag(POOL_ADJUSTMENT_TYPE)],
        Annotated[StockTransactionRecord, Tag("TX_STOCK")],
        Annotated[PlanSecurityTransactionRecord, Tag("TX_PLAN_SECURITY")],
    ],
    Discriminator(record_tag),
]
"""Discriminated union of every OCF record the model understands.

The tag is computed from ``object_type`` by ``record_tag`` so that whole
families (``TX_STOCK_*``) decode into one variant.
"""

_record_adapter: TypeAdapter = TypeAdapter(Record)


def decode_record(value: Any) -> Optional[OcfRecord]:
    """Decode a raw OCF mapping into its record variant.

    Args:
        value: Parsed OCF object (mapping) or an already-decoded record

    Returns:
        The decoded record, or None when ``object_type`` is unknown

    Raises:
        pydantic.ValidationError: If a known record kind is malformed
    """
    if isinstance(value, OcfRecord):
        return value
    if record_tag(value) is None:
        return None
    return _record_adapter.validate_python(value)
