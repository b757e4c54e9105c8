"""
Cart aggregation for an in-progress order.

The cart is keyed by item name: adding an item that is already present
changes that line's quantity instead of creating a second line. A line whose
quantity would drop to zero or below is removed.

The Cart itself only tracks state. Availability gating happens before the
cart is touched, in add_to_cart(), which consults the stock classifier.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .stock import AvailabilityState, classify, classify_item

logger = logging.getLogger(__name__)


class LineItem(BaseModel):
    """One cart line. ``price`` is the unit price captured when the line was created."""

    name: str
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)
    category: Optional[str] = None
    instruction: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class ItemUnavailableError(Exception):
    """Raised when an unavailable item is added to a cart."""

    def __init__(self, item_name: str, state: AvailabilityState = AvailabilityState.UNAVAILABLE):
        self.item_name = item_name
        self.state = state
        super().__init__(f"{item_name} is currently unavailable")


class Cart:
    """Quantity-keyed collection of line items for a single ordering session."""

    def __init__(self, lines: Optional[List[LineItem]] = None):
        """Start from ``lines``; the cart keeps its own copies and merges repeated names."""
        self._lines: Dict[str, LineItem] = {}
        for line in lines or []:
            existing = self._lines.get(line.name)
            if existing is None:
                self._lines[line.name] = line.model_copy()
            else:
                existing.quantity += line.quantity

    @property
    def lines(self) -> List[LineItem]:
        """Current lines in insertion order (copies; mutate through the cart)."""
        return [line.model_copy() for line in self._lines.values()]

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get(self, item_name: str) -> Optional[LineItem]:
        line = self._lines.get(item_name)
        return line.model_copy() if line is not None else None

    def add(self, item: Any, category: Any = None, delta: int = 1) -> Optional[LineItem]:
        """
        Apply a quantity delta for ``item``.

        Args:
            item: Anything with ``name`` and ``price`` (menu row or schema)
            category: Anything with ``name``, or a category name string
            delta: Quantity change; negative values reduce an existing line

        Returns:
            The resulting line, or None when no line exists afterwards
        """
        existing = self._lines.get(item.name)

        if existing is None:
            if delta <= 0:
                return None
            category_name = category if isinstance(category, str) or category is None else category.name
            line = LineItem(
                name=item.name,
                quantity=delta,
                price=item.price,
                category=category_name,
            )
            self._lines[line.name] = line
            return line.model_copy()

        return self.set_quantity(item.name, existing.quantity + delta)

    def set_quantity(self, item_name: str, quantity: int) -> Optional[LineItem]:
        """Set an existing line's quantity; zero or less removes it. Unknown names are ignored."""
        line = self._lines.get(item_name)
        if line is None:
            return None
        if quantity <= 0:
            self.remove(item_name)
            return None
        line.quantity = quantity
        return line.model_copy()

    def remove(self, item_name: str) -> None:
        self._lines.pop(item_name, None)

    def set_instruction(self, item_name: str, text: Optional[str]) -> None:
        line = self._lines.get(item_name)
        if line is None:
            return
        line.instruction = text

    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def clear(self) -> None:
        self._lines.clear()


def add_to_cart(
    cart: Cart,
    item: Any,
    category: Any = None,
    delta: int = 1,
    category_status: Optional[str] = None,
) -> Optional[LineItem]:
    """
    Add to a cart after checking availability.

    Positive deltas on an unavailable item raise ItemUnavailableError and leave
    the cart untouched. Reductions are always allowed.

    ``category`` is normally the category row, whose status gates the item.
    When only the category name is at hand, pass its status as
    ``category_status`` so an unavailable category still blocks the add.
    """
    if delta > 0:
        if isinstance(category, str) or category is None:
            state = classify(getattr(item, "status", None), category_status)
        else:
            state = classify_item(item, category)
        if state == AvailabilityState.UNAVAILABLE:
            logger.info("Rejected add of unavailable item '%s'", item.name)
            raise ItemUnavailableError(item.name, state)
    return cart.add(item, category, delta)
