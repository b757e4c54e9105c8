"""
Bill calculation utilities.

All money is handled as Decimal and rounded half-up to two places at each
computed amount, so totals never drift the way float arithmetic does.
Conversion to display strings happens only when formatting receipts.

Formula:
    subtotal = sum(price * quantity)
    discount = subtotal * discount_percent / 100   (percent clamped to 0-20)
    tax      = subtotal * tax_rate                 (pre-discount by default)
    total    = subtotal - discount + tax
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Tuple

from .. import config
from .cart import LineItem

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Convert user or database input to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(str(value))


def round_money(amount: Any) -> Decimal:
    """Round to 2 decimal places for currency (half-up)."""
    return to_decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def clamp_discount(percent: Any, maximum: Optional[Decimal] = None) -> Decimal:
    """
    Clamp a discount percentage into [0, maximum].

    Unparseable input counts as no discount. Out-of-range values are clamped,
    never rejected.
    """
    if maximum is None:
        maximum = config.MAX_DISCOUNT_PERCENT
    try:
        value = to_decimal(percent if percent is not None else 0)
    except (InvalidOperation, ValueError):
        logger.warning("Ignoring unparseable discount %r", percent)
        return ZERO
    if value.is_nan():
        return ZERO
    return max(ZERO, min(value, maximum))


def format_percent(percent: Decimal) -> str:
    """10 -> "10", 12.5 -> "12.5"."""
    normalized = to_decimal(percent).normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal("1")))
    return format(normalized, "f")


@dataclass(frozen=True)
class BillTotals:
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal

    @property
    def has_discount(self) -> bool:
        """Whether a receipt shows a Discount line."""
        return self.discount_percent > 0


def compute_bill(
    items: Iterable[LineItem],
    discount_percent: Any = 0,
    tax_rate: Any = None,
    tax_on_discounted_subtotal: Optional[bool] = None,
) -> BillTotals:
    """
    Compute subtotal, discount, tax, and total for a list of lines.

    Args:
        items: Order lines (price and quantity are read)
        discount_percent: Requested discount; clamped to [0, 20]
        tax_rate: Fractional tax rate; defaults to config.TAX_RATE
        tax_on_discounted_subtotal: Tax base override; defaults to config

    Returns:
        BillTotals with every amount rounded to cents
    """
    if tax_rate is None:
        tax_rate = config.TAX_RATE
    if tax_on_discounted_subtotal is None:
        tax_on_discounted_subtotal = config.TAX_ON_DISCOUNTED_SUBTOTAL

    rate = to_decimal(tax_rate)
    percent = clamp_discount(discount_percent)

    subtotal = round_money(sum((to_decimal(item.price) * item.quantity for item in items), ZERO))
    discount_amount = round_money(subtotal * percent / 100)
    taxable = subtotal - discount_amount if tax_on_discounted_subtotal else subtotal
    tax_amount = round_money(taxable * rate)
    total = subtotal - discount_amount + tax_amount

    return BillTotals(
        subtotal=subtotal,
        discount_percent=percent,
        discount_amount=discount_amount,
        tax_rate=rate,
        tax_amount=tax_amount,
        total=total,
    )


@dataclass(frozen=True)
class Bill:
    """A checked-out order. Lines are snapshots; nothing here changes after creation."""

    lines: Tuple[LineItem, ...]
    totals: BillTotals
    table_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total(self) -> Decimal:
        return self.totals.total


def create_bill(
    items: Iterable[LineItem],
    discount_percent: Any = 0,
    tax_rate: Any = None,
    table_id: Optional[str] = None,
) -> Bill:
    """Freeze the given lines into a Bill."""
    snapshot = tuple(item.model_copy(deep=True) for item in items)
    return Bill(
        lines=snapshot,
        totals=compute_bill(snapshot, discount_percent, tax_rate),
        table_id=table_id,
    )


class InsufficientPaymentError(Exception):
    """Raised when cash tendered does not cover the bill."""

    def __init__(self, total: Decimal, received: Decimal):
        self.total = total
        self.received = received
        super().__init__(
            f"Cash received ({received}) must be equal to or greater than the total amount ({total})"
        )


def change_due(total: Any, cash_received: Any) -> Decimal:
    """Change to hand back for a cash payment."""
    total = round_money(total)
    received = round_money(cash_received)
    if received < total:
        raise InsufficientPaymentError(total, received)
    return received - total
