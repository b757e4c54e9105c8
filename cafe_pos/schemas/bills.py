"""
Bill Schemas for Cafe POS
=========================

The discount is clamped rather than rejected: a request for 35% becomes
20%, a negative one becomes 0%.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from ..services.billing import BillTotals
from ..services.cart import LineItem
from .receipt import ReceiptOut


class BillPreviewRequest(BaseModel):
    items: List[LineItem] = Field(min_length=1)
    discount_percent: Decimal = Decimal("0")
    venue_name: Optional[str] = None


class BillOut(BaseModel):
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    show_discount: bool

    @classmethod
    def from_totals(cls, totals: BillTotals) -> "BillOut":
        return cls(
            subtotal=totals.subtotal,
            discount_percent=totals.discount_percent,
            discount_amount=totals.discount_amount,
            tax_rate=totals.tax_rate,
            tax_amount=totals.tax_amount,
            total=totals.total,
            show_discount=totals.has_discount,
        )


class BillPreviewResponse(BaseModel):
    bill: BillOut
    receipt: ReceiptOut
