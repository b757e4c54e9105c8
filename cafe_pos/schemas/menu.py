"""
Menu Schemas for Cafe POS
=========================

Menu responses carry two availability views per item:

- **availability**: the gating state (category dominates). Anything
  "unavailable" here cannot be added to a cart.
- **badge**: the more specific state for display (the item's own flag when
  set, otherwise the category's).
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..services.stock import AvailabilityState, parse_status


class MenuItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    code: Optional[str] = None
    price: Decimal
    is_vegetarian: Optional[bool] = None
    status: Optional[str] = None
    availability: AvailabilityState
    badge: AvailabilityState


class MenuCategoryOut(BaseModel):
    name: str
    status: Optional[str] = None
    items: List[MenuItemOut]


class StockAlertItem(BaseModel):
    name: str
    category: str


class StockAlertsOut(BaseModel):
    low: List[StockAlertItem]
    out: List[StockAlertItem]


class StatusUpdate(BaseModel):
    """
    New stored status. ``null`` clears the flag (available by default);
    "out" is accepted as a synonym for "unavailable".
    """

    status: Optional[AvailabilityState] = None

    @field_validator("status", mode="before")
    @classmethod
    def parse(cls, value):
        if value is None:
            return None
        parsed = parse_status(value)
        if parsed is None:
            raise ValueError("status must be one of: available, low, unavailable")
        return parsed
