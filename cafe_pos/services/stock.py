"""
Stock availability classification.

Menu items and categories carry a stored status flag. Gating decisions
(can this item be added to a cart?) combine both flags, with the category
dominating. Informational badges show the more specific state instead.
"""

from enum import Enum
from typing import Any, Iterable, List, Optional


class AvailabilityState(str, Enum):
    AVAILABLE = "available"
    LOW = "low"
    UNAVAILABLE = "unavailable"


# Older menus stored "out" for unavailable items
_STATUS_ALIASES = {
    "available": AvailabilityState.AVAILABLE,
    "low": AvailabilityState.LOW,
    "unavailable": AvailabilityState.UNAVAILABLE,
    "out": AvailabilityState.UNAVAILABLE,
}


def parse_status(value: Any) -> Optional[AvailabilityState]:
    """Read a stored status flag. Missing or unknown values yield None."""
    if value is None:
        return None
    if isinstance(value, AvailabilityState):
        return value
    return _STATUS_ALIASES.get(str(value).strip().lower())


def classify(item_status: Any, category_status: Any = None) -> AvailabilityState:
    """
    Derive the gating state for an item within its category.

    Category "unavailable" wins over everything, then item "unavailable",
    then "low" on either side. Anything else is available.
    """
    item_state = parse_status(item_status)
    category_state = parse_status(category_status)

    if category_state == AvailabilityState.UNAVAILABLE:
        return AvailabilityState.UNAVAILABLE
    if item_state == AvailabilityState.UNAVAILABLE:
        return AvailabilityState.UNAVAILABLE
    if AvailabilityState.LOW in (item_state, category_state):
        return AvailabilityState.LOW
    return AvailabilityState.AVAILABLE


def badge_state(item_status: Any, category_status: Any = None) -> AvailabilityState:
    """State to display on an item's badge: its own flag when set, else the category's."""
    item_state = parse_status(item_status)
    if item_state is not None:
        return item_state
    return parse_status(category_status) or AvailabilityState.AVAILABLE


def classify_item(item: Any, category: Any = None) -> AvailabilityState:
    """classify() over objects exposing a ``status`` attribute (ORM rows or schemas)."""
    category_status = getattr(category, "status", None) if category is not None else None
    return classify(getattr(item, "status", None), category_status)


def low_stock_items(categories: Iterable[Any]) -> List[Any]:
    """Items running low, either on their own or through their category. Unavailable items are excluded."""
    return [
        item
        for category in categories
        for item in category.items
        if classify_item(item, category) == AvailabilityState.LOW
    ]


def out_of_stock_items(categories: Iterable[Any]) -> List[Any]:
    return [
        item
        for category in categories
        for item in category.items
        if classify_item(item, category) == AvailabilityState.UNAVAILABLE
    ]
