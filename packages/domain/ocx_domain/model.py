"""In-memory capitalization model built from an OCF record stream.

The model is populated by repeated ``consume`` calls and then queried by the
report layer. Records may arrive in any order: a cancellation can be consumed
before the issuance of the security it cancels, so holdings are never stored,
only recomputed from the transaction log when asked for.

Usage:
    model = Model(as_of_date=date(2024, 6, 30))
    model.consume_all(ocf_objects)

    for stakeholder in model.stakeholders:
        for stock_class in model.stock_classes:
            shares = model.get_stakeholder_stock_holdings(stakeholder, stock_class)
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .calculations import (
    OutstandingSharesCalculator,
    PoolConsumptionCalculator,
    convert_ratio_to_decimal_number,
)
from .errors import MalformedRatioError
from .schemas.capitalization import (
    RoundingType,
    Stakeholder,
    StockClass,
    StockPlan,
    rounding_type_from_ocf,
    stakeholder_group_label,
)
from .schemas.records import (
    IssuerRecord,
    PlanSecurityTransactionRecord,
    SecurityTransactionRecord,
    StakeholderRecord,
    StockClassRecord,
    StockPlanPoolAdjustmentRecord,
    StockPlanRecord,
    StockTransactionRecord,
    decode_record,
)

logger = logging.getLogger(__name__)

# Stock classes without a board approval date sort after every approved class.
UNAPPROVED_SORT_DATE = date.max


def stock_class_sort_key(stock_class: StockClass) -> Tuple:
    """Common before preferred, then older approvals first, then by name."""
    return (
        stock_class.is_preferred,
        stock_class.board_approval_date or UNAPPROVED_SORT_DATE,
        stock_class.display_name.casefold(),
        stock_class.display_name,
    )


class Model:
    """Capitalization model answering point-in-time holdings queries.

    Indexes:
        - transactions by security id (every security transaction consumed)
        - issued securities by (stakeholder id, stock class id)
        - issued securities by (stakeholder id, stock plan id)

    Holdings are computed on demand by replaying every transaction of every
    security issued to a stakeholder in a class or plan.

    Notes:
        - Duplicate STAKEHOLDER ids are not merged; each record becomes a row.
        - Stock classes are exposed sorted, stock plans in consumption order.
        - Consumption and rendering must not be interleaved.
    """

    def __init__(
        self,
        as_of_date: Optional[date] = None,
        generated_at_timestamp: Optional[datetime] = None,
    ):
        self._as_of_date = as_of_date or date.today()
        self._generated_at_timestamp = generated_at_timestamp or datetime.now()

        self.issuer_name = ""
        self._stakeholders: List[Stakeholder] = []
        self._stock_classes: List[StockClass] = []
        self._sorted_stock_classes: List[StockClass] = []
        self._stock_classes_dirty = False
        self._stock_plans: List[StockPlan] = []

        self._plan_reserved_shares: Dict[str, Decimal] = {}
        self._pool_adjustments: Dict[str, Tuple[date, int, Decimal]] = {}

        # Insertion-ordered sets: consuming an identical record twice counts it once
        self._transactions_by_security_id: Dict[str, Dict[SecurityTransactionRecord, None]] = defaultdict(dict)
        self._issued_securities_by_stakeholder_and_stock_class: Dict[Tuple[str, str], Set[str]] = defaultdict(set)
        self._issued_securities_by_stakeholder_and_stock_plan: Dict[Tuple[str, str], Set[str]] = defaultdict(set)
        self._issued_securities_by_stock_plan: Dict[str, Set[str]] = defaultdict(set)

        self._consumed = 0
        self._ignored = 0

    # ------------------------------------------------------------------ #
    # Metadata
    # ------------------------------------------------------------------ #

    @property
    def as_of_date(self) -> date:
        return self._as_of_date

    @property
    def generated_at_timestamp(self) -> datetime:
        return self._generated_at_timestamp

    # ------------------------------------------------------------------ #
    # Consumption
    # ------------------------------------------------------------------ #

    def consume(self, value: Any) -> None:
        """Add one OCF object to the model.

        Args:
            value: Parsed OCF object (mapping) or a decoded record

        Raises:
            pydantic.ValidationError: If a known record kind is malformed
            MalformedRatioError: If a stock class conversion ratio is malformed

        Unknown object types are ignored.
        """
        record = decode_record(value)
        if record is None:
            self._ignored += 1
            logger.debug(f"Ignoring OCF object of unknown type: {_object_type_of(value)!r}")
            return

        if isinstance(record, IssuerRecord):
            self._issuer(record)
        elif isinstance(record, StakeholderRecord):
            self._stakeholder(record)
        elif isinstance(record, StockClassRecord):
            self._stock_class(record)
        elif isinstance(record, StockPlanRecord):
            self._stock_plan(record)
        elif isinstance(record, StockPlanPoolAdjustmentRecord):
            self._pool_adjustment(record)
        elif isinstance(record, StockTransactionRecord):
            self._stock_transaction(record)
        elif isinstance(record, PlanSecurityTransactionRecord):
            self._plan_security_transaction(record)

        self._consumed += 1

    def consume_all(self, values: Iterable[Any]) -> "Model":
        """Consume every object of an OCF stream and return the model."""
        for value in values:
            self.consume(value)

        logger.info(
            f"Consumed {self._consumed} OCF objects ({self._ignored} ignored): "
            f"{len(self._stakeholders)} stakeholders, {len(self._stock_classes)} stock classes, "
            f"{len(self._stock_plans)} stock plans, {len(self._transactions_by_security_id)} securities"
        )
        return self

    def _issuer(self, record: IssuerRecord) -> None:
        if record.dba is not None:
            self.issuer_name = record.dba
        elif record.legal_name is not None:
            self.issuer_name = record.legal_name

    def _stakeholder(self, record: StakeholderRecord) -> None:
        legal_name = record.name.legal_name if record.name else None
        self._stakeholders.append(
            Stakeholder(
                id=record.id,
                display_name=legal_name or " - ",
                group=stakeholder_group_label(
                    record.current_relationship, record.stakeholder_type
                ),
            )
        )

    def _stock_class(self, record: StockClassRecord) -> None:
        conversion_ratio, rounding_type = self._conversion_terms(record)
        self._stock_classes.append(
            StockClass(
                id=record.id,
                display_name=record.name,
                is_preferred=record.class_type != "COMMON",
                conversion_ratio=conversion_ratio,
                board_approval_date=record.board_approval_date,
                rounding_type=rounding_type,
            )
        )
        self._stock_classes_dirty = True

    def _stock_plan(self, record: StockPlanRecord) -> None:
        self._stock_plans.append(
            StockPlan(
                id=record.id,
                plan_name=record.plan_name,
                initial_shares_reserved=record.shares_reserved,
                board_approval_date=record.board_approval_date,
            )
        )
        self._plan_reserved_shares[record.id] = record.shares_reserved

    def _pool_adjustment(self, record: StockPlanPoolAdjustmentRecord) -> None:
        key = (record.date or date.min, self._consumed, record.shares_reserved)
        current = self._pool_adjustments.get(record.stock_plan_id)
        if current is None or key[:2] >= current[:2]:
            self._pool_adjustments[record.stock_plan_id] = key

    def _stock_transaction(self, record: StockTransactionRecord) -> None:
        if record.is_issuance:
            self._issued_securities_by_stakeholder_and_stock_class[
                (record.stakeholder_id, record.stock_class_id)
            ].add(record.security_id)
        self._record_transaction(record)

    def _plan_security_transaction(self, record: PlanSecurityTransactionRecord) -> None:
        if record.is_issuance and record.stock_plan_id is not None:
            self._issued_securities_by_stakeholder_and_stock_plan[
                (record.stakeholder_id, record.stock_plan_id)
            ].add(record.security_id)
            self._issued_securities_by_stock_plan[record.stock_plan_id].add(record.security_id)
        self._record_transaction(record)

    def _record_transaction(self, record: SecurityTransactionRecord) -> None:
        if record.security_id is None:
            # Class-level transactions (splits, authorized share changes) name no security
            logger.debug(f"{record.object_type} has no security_id; not tracked per security")
            return
        self._transactions_by_security_id[record.security_id][record] = None

    def _conversion_terms(self, record: StockClassRecord) -> Tuple[float, RoundingType]:
        mechanism = record.first_conversion_mechanism
        if mechanism is None:
            return 1.0, "NEAREST"

        rounding_type = rounding_type_from_ocf(mechanism.rounding_type)
        if mechanism.type != "RATIO_CONVERSION" or mechanism.ratio is None:
            return 1.0, rounding_type

        ratio = convert_ratio_to_decimal_number(mechanism.ratio)
        if ratio <= 0:
            raise MalformedRatioError(
                f"Stock class {record.id!r} has non-positive conversion ratio {ratio}"
            )
        return float(ratio), rounding_type

    # ------------------------------------------------------------------ #
    # Collections
    # ------------------------------------------------------------------ #

    @property
    def stakeholders(self) -> List[Stakeholder]:
        return list(self._stakeholders)

    @property
    def stock_classes(self) -> List[StockClass]:
        """Stock classes sorted for display (see ``stock_class_sort_key``)."""
        if self._stock_classes_dirty:
            self._sorted_stock_classes = sorted(self._stock_classes, key=stock_class_sort_key)
            self._stock_classes_dirty = False
        return list(self._sorted_stock_classes)

    @property
    def stock_plans(self) -> List[StockPlan]:
        return list(self._stock_plans)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_stakeholder_stock_holdings(self, stakeholder: Stakeholder, stock_class: StockClass) -> Decimal:
        """Net shares of ``stock_class`` held by ``stakeholder``.

        Returns 0 for pairs without issuances.
        """
        security_ids = self._issued_securities_by_stakeholder_and_stock_class.get(
            (stakeholder.id, stock_class.id), set()
        )
        holdings = self._replay(OutstandingSharesCalculator(), security_ids)
        if holdings < 0:
            logger.warning(
                f"Stakeholder {stakeholder.id!r} has negative holdings ({holdings}) in {stock_class.id!r}"
            )
        return holdings

    def get_stock_class_conversion_ratio(self, stock_class: StockClass) -> float:
        return stock_class.conversion_ratio

    def get_stakeholder_stock_plan_holdings(self, stakeholder: Stakeholder, stock_plan: StockPlan) -> Decimal:
        """Net options/awards granted to ``stakeholder`` under ``stock_plan``."""
        security_ids = self._issued_securities_by_stakeholder_and_stock_plan.get(
            (stakeholder.id, stock_plan.id), set()
        )
        return self._replay(OutstandingSharesCalculator(), security_ids)

    def get_stock_plan_reserved_shares(self, stock_plan: StockPlan) -> Decimal:
        """Shares reserved for the plan, after the latest pool adjustment."""
        adjustment = self._pool_adjustments.get(stock_plan.id)
        if adjustment is not None:
            return adjustment[2]
        return self._plan_reserved_shares.get(stock_plan.id, stock_plan.initial_shares_reserved)

    def get_options_remaining_for_issuance(self, stock_plan: StockPlan) -> Decimal:
        """Reserved shares not yet drawn by grants under the plan."""
        security_ids = self._issued_securities_by_stock_plan.get(stock_plan.id, set())
        consumed = self._replay(PoolConsumptionCalculator(), security_ids)
        return self.get_stock_plan_reserved_shares(stock_plan) - consumed

    def _replay(self, calculator, security_ids: Iterable[str]) -> Decimal:
        for security_id in security_ids:
            calculator.apply_all(self._transactions_by_security_id.get(security_id, ()))
        return calculator.value


def _object_type_of(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return value.get("object_type")
    return getattr(value, "object_type", None)
