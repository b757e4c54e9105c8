"""
Order Schemas for Cafe POS
==========================

Order Lifecycle:
----------------
1. **Pending**: Submitted from a cart; the table is marked Occupied
2. **Completed**: Bill settled; the table moves to Cleaning

Order Types:
------------
- **Dine-In**: Tied to a table
- **Take-Away**: No table
- **Home-Delivery**: No table, customer name printed on tickets

Money fields are Decimal and serialize as strings ("254.60") so clients
never see float rounding artifacts.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..services.cart import LineItem
from .bills import BillOut
from .receipt import ReceiptOut

OrderType = Literal["Dine-In", "Take-Away", "Home-Delivery"]


class OrderLineIn(BaseModel):
    """
    One submitted line. The unit price is snapshotted from the menu at
    submission; clients cannot set it. ``category`` is only needed when the
    name appears in more than one category.
    """

    name: str
    quantity: int = Field(ge=1)
    category: Optional[str] = None
    instruction: Optional[str] = None


class OrderCreate(BaseModel):
    table_id: Optional[str] = None
    order_type: OrderType = "Dine-In"
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    items: List[OrderLineIn] = Field(min_length=1)


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    category: Optional[str] = None
    quantity: int
    unit_price: Decimal
    instruction: Optional[str] = None


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    table_id: Optional[str] = None
    order_type: str
    status: str
    customer_name: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    items: List[OrderItemOut]
    total: Optional[Decimal] = None


class KOTUpdateRequest(BaseModel):
    """Lines already sent to the kitchen; only the difference is ticketed."""

    sent: List[LineItem] = Field(default_factory=list)


class SettleRequest(BaseModel):
    discount_percent: Decimal = Decimal("0")
    payment_method: Literal["cash", "online"] = "cash"
    cash_received: Optional[Decimal] = None
    venue_name: Optional[str] = None


class SettleResponse(BaseModel):
    order: OrderOut
    bill: BillOut
    receipt: ReceiptOut
    change_due: Optional[Decimal] = None
