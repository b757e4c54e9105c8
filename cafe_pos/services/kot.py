"""
Kitchen Order Ticket (KOT) Routing
==================================

Partitions a finalized order into named ticket groups, one per preparation
station or per specially configured category. Every item lands in exactly
one group; nothing is dropped or duplicated.

Routing Modes:
--------------
- **single**: One "KOT" ticket with every item, in order.
- **separate**: Items split by station. With the default station map this
  gives "Kitchen KOT" (everything except Beverages) followed by "Bar KOT".
- **category**: Items in the configured categories get their own
  "<Category> KOT" ticket, in configured order. Everything else is split by
  station as in separate mode, and those tickets come first.

An unrecognised mode routes as single. Malformed preference payloads never
raise; they degrade to the closest valid preference.

Stations:
---------
Which station a category goes to comes from a StationMap. The default maps
"Beverages" to "bar" and everything else to "kitchen". Category matching is
case-insensitive and ignores surrounding whitespace.

Usage:
------
    pref = KOTPreference.from_config({"type": "category", "categories": ["Desserts"]})
    for group in route_items(order_items, pref):
        print(render_kot_ticket(group, order_number=7, table_id="4"))
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .. import config
from .cart import LineItem

logger = logging.getLogger(__name__)

TICKET_RULE = "-" * 25


class KOTMode(str, Enum):
    SINGLE = "single"
    SEPARATE = "separate"
    CATEGORY = "category"


class KOTPreference(BaseModel):
    """How an order is split into tickets. ``categories`` only matters in category mode."""

    type: KOTMode = KOTMode.SINGLE
    categories: List[str] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_is_single(cls, value: Any) -> KOTMode:
        if isinstance(value, KOTMode):
            return value
        try:
            return KOTMode(str(value).strip().lower())
        except ValueError:
            logger.debug("Unrecognised KOT type %r, routing as single", value)
            return KOTMode.SINGLE

    @field_validator("categories", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def categories_only_in_category_mode(self) -> "KOTPreference":
        if self.type != KOTMode.CATEGORY:
            self.categories = []
        else:
            # A repeated category would put its items on two tickets
            self.categories = list(dict.fromkeys(self.categories))
        return self

    @classmethod
    def from_config(cls, raw: Any) -> "KOTPreference":
        """Build a preference from a stored config mapping, tolerating bad shapes."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, Mapping):
            return cls()
        try:
            return cls.model_validate(raw)
        except ValidationError:
            logger.warning("Malformed KOT preference %r, ignoring categories", raw)
            return cls(type=raw.get("type"))


def _normalize_category(name: Optional[str]) -> str:
    return (name or "").strip().casefold()


class StationMap:
    """Category to preparation-station lookup."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None, default_station: str = "kitchen"):
        if mapping is None:
            mapping = {"Beverages": "bar"}
        self.default_station = default_station
        self._by_category: Dict[str, str] = {
            _normalize_category(category): station for category, station in mapping.items()
        }
        # Default station first, then the others in declaration order
        self.stations: List[str] = list(dict.fromkeys([default_station, *mapping.values()]))

    @classmethod
    def from_config(cls) -> "StationMap":
        return cls(config.get_station_map_config(), config.KOT_DEFAULT_STATION)

    def station_for(self, category: Optional[str]) -> str:
        return self._by_category.get(_normalize_category(category), self.default_station)

    @staticmethod
    def title_for(station: str) -> str:
        return f"{station.title()} KOT"


@dataclass
class KOTGroup:
    title: str
    items: List[LineItem] = field(default_factory=list)


def _split_by_station(items: Sequence[LineItem], stations: StationMap) -> List[KOTGroup]:
    by_station: Dict[str, List[LineItem]] = {station: [] for station in stations.stations}
    for item in items:
        by_station[stations.station_for(item.category)].append(item)
    return [
        KOTGroup(title=stations.title_for(station), items=station_items)
        for station, station_items in by_station.items()
        if station_items
    ]


def route_items(
    items: Sequence[LineItem],
    preference: Any = None,
    station_map: Optional[StationMap] = None,
) -> List[KOTGroup]:
    """
    Partition ``items`` into ticket groups.

    Args:
        items: Finalized order lines
        preference: KOTPreference or a raw config mapping; None means single
        station_map: Station lookup; defaults to the configured map

    Returns:
        Non-empty ticket groups; an empty list for an empty order
    """
    if not items:
        return []

    pref = KOTPreference.from_config(preference)
    stations = station_map or StationMap.from_config()

    if pref.type == KOTMode.SEPARATE:
        return _split_by_station(items, stations)

    if pref.type == KOTMode.CATEGORY:
        special = set(pref.categories)
        general = [item for item in items if item.category not in special]
        groups = _split_by_station(general, stations)
        for category in pref.categories:
            category_items = [item for item in items if item.category == category]
            if category_items:
                groups.append(KOTGroup(title=f"{category} KOT", items=category_items))
        return groups

    return [KOTGroup(title="KOT", items=list(items))]


def new_items_since(current: Iterable[LineItem], sent: Iterable[LineItem]) -> List[LineItem]:
    """
    Lines that still need to go to the kitchen.

    Compares the current order with what was already sent and returns new
    lines plus quantity increases (as lines carrying only the increment).
    """
    sent_quantities = {line.name: line.quantity for line in sent}
    pending = []
    for line in current:
        already_sent = sent_quantities.get(line.name, 0)
        if line.quantity > already_sent:
            pending.append(line.model_copy(update={"quantity": line.quantity - already_sent}))
    return pending


def ticket_heading(
    order_type: str,
    table_id: Optional[str] = None,
    customer_name: Optional[str] = None,
) -> str:
    if order_type == "Dine-In" and table_id:
        return f"Table {table_id}"
    if order_type == "Take-Away":
        return "Take Away"
    if order_type == "Home-Delivery":
        return customer_name or "Home Delivery"
    return "Unassigned Order"


def render_kot_ticket(
    group: KOTGroup,
    order_number: Any,
    order_type: str = "Dine-In",
    table_id: Optional[str] = None,
    customer_name: Optional[str] = None,
    is_update: bool = False,
) -> str:
    """Plain-text ticket for one group, ready for a kitchen printer or display."""
    title = f"UPDATE - {group.title}" if is_update else group.title
    lines = [
        title,
        f"Order ID: {str(order_number).rjust(3, '0')} | {ticket_heading(order_type, table_id, customer_name)}",
        TICKET_RULE,
    ]
    for item in group.items:
        prefix = "+" if is_update else ""
        lines.append(f"{prefix}{item.quantity} x {item.name}")
        if item.instruction:
            lines.append(f"   Note: {item.instruction}")
    lines.append(TICKET_RULE)
    return "\n".join(lines)
