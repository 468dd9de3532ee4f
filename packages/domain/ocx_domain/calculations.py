"""Exact arithmetic for conversion ratios and share counts.

Conversion ratios stay rational (``Fraction``) until the caller needs a
number for the workbook; share counts are ``Decimal`` throughout.

Transaction replay is order-independent. OCF streams are not guaranteed to be
chronological, and the model hands the calculators transactions in whatever
order it stored them, so every effect is a commutative sum:

    outstanding = 0 if voided else issued - reductions
"""

from abc import ABC, abstractmethod
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from fractions import Fraction
from typing import Any, Dict, Iterable, Mapping, Optional, Set, Union

from .errors import MalformedRatioError
from .schemas.records import Ratio, SecurityTransactionRecord


# Kinds are object types without their family prefix (see SecurityTransactionRecord.kind)
ADDING_KINDS = frozenset({"ISSUANCE"})
REDUCING_KINDS = frozenset({
    "CANCELLATION",
    "CONVERSION",
    "EXERCISE",
    "RELEASE",
    "REPURCHASE",
    "TRANSFER",
})
VOIDING_KINDS = frozenset({"RETRACTION", "REISSUANCE"})


# =============================================================================
# Ratios
# =============================================================================

def _to_decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise MalformedRatioError(f"Ratio {field} must be a decimal string, got {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise MalformedRatioError(f"Ratio {field} is not numeric: {value!r}") from exc
    if not number.is_finite():
        raise MalformedRatioError(f"Ratio {field} must be finite, got {value!r}")
    return number


def convert_ratio_to_decimal_number(ratio: Union[Ratio, Mapping[str, Any]]) -> Fraction:
    """Convert an OCF ratio into an exact rational number.

    Args:
        ratio: Ratio record, or mapping with ``numerator`` and ``denominator``
               given as decimal strings

    Returns:
        numerator / denominator as a Fraction (no rounding has happened yet)

    Raises:
        MalformedRatioError: If either part is not numeric or the
            denominator is zero

    Example:
        >>> float(convert_ratio_to_decimal_number({"numerator": "4", "denominator": "3"}))
        1.3333333333333333
    """
    if isinstance(ratio, Mapping):
        numerator, denominator = ratio.get("numerator"), ratio.get("denominator")
    else:
        numerator, denominator = ratio.numerator, ratio.denominator

    numerator = _to_decimal(numerator, "numerator")
    denominator = _to_decimal(denominator, "denominator")
    if denominator == 0:
        raise MalformedRatioError(f"Ratio denominator is zero (numerator {numerator})")

    return Fraction(numerator) / Fraction(denominator)


# =============================================================================
# Transaction Replay
# =============================================================================

class _ReplayCalculator(ABC):
    """Accumulates per-security transaction effects.

    Effects are tracked per security so that a retraction voids exactly the
    security it names, whenever it is replayed.
    """

    def __init__(self):
        self._totals: Dict[Optional[str], Decimal] = {}
        self._voided: Set[Optional[str]] = set()

    def apply(self, txn: SecurityTransactionRecord) -> "_ReplayCalculator":
        if txn.kind in VOIDING_KINDS:
            self._voided.add(txn.security_id)
            return self
        delta = self._delta(txn)
        if delta:
            self._totals[txn.security_id] = self._totals.get(txn.security_id, Decimal("0")) + delta
        return self

    def apply_all(self, txns: Iterable[SecurityTransactionRecord]) -> "_ReplayCalculator":
        for txn in txns:
            self.apply(txn)
        return self

    @property
    def value(self) -> Decimal:
        return sum(
            (total for security_id, total in self._totals.items() if security_id not in self._voided),
            Decimal("0"),
        )

    @abstractmethod
    def _delta(self, txn: SecurityTransactionRecord) -> Decimal:
        """Signed change this transaction makes to its security's total."""
        pass


class OutstandingSharesCalculator(_ReplayCalculator):
    """Net shares (or options) outstanding across a set of securities.

    Issuance adds its quantity; cancellation, transfer, repurchase,
    conversion, exercise and release subtract theirs; retraction and
    reissuance void the security. Acceptances, vesting events and other
    kinds change nothing.
    """

    def _delta(self, txn: SecurityTransactionRecord) -> Decimal:
        if txn.kind in ADDING_KINDS:
            return txn.quantity or Decimal("0")
        if txn.kind == "CONVERSION":
            quantity = txn.quantity_converted if txn.quantity_converted is not None else txn.quantity
            return -(quantity or Decimal("0"))
        if txn.kind in REDUCING_KINDS:
            return -(txn.quantity or Decimal("0"))
        return Decimal("0")


class PoolConsumptionCalculator(_ReplayCalculator):
    """Shares a plan's securities draw from its reserved pool.

    Cancelled and retracted grants go back to the pool. Transferred
    quantity is subtracted because the transferee's security is issued
    separately. Exercised and released shares stay consumed.
    """

    def _delta(self, txn: SecurityTransactionRecord) -> Decimal:
        if txn.kind in ADDING_KINDS:
            return txn.quantity or Decimal("0")
        if txn.kind in ("CANCELLATION", "TRANSFER"):
            return -(txn.quantity or Decimal("0"))
        return Decimal("0")


# =============================================================================
# As-Converted Rounding
# =============================================================================

_ROUNDING_MODES = {
    "NEAREST": ROUND_HALF_UP,
    "FLOOR": ROUND_FLOOR,
    "CEILING": ROUND_CEILING,
}


def as_converted_shares(outstanding: Decimal, conversion_ratio: float, rounding_type: str = "NEAREST") -> Decimal:
    """Common-equivalent shares, rounded to whole shares.

    Mirrors the workbook formulas ``ROUND(x * r, 0)``, ``FLOOR(x * r, 1)`` and
    ``CEILING(x * r, 1)``; the ratio is used exactly as the formula prints it.
    """
    ratio = Decimal(repr(conversion_ratio))
    mode = _ROUNDING_MODES.get(rounding_type, ROUND_HALF_UP)
    return (Decimal(outstanding) * ratio).quantize(Decimal("1"), rounding=mode)
