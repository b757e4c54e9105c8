"""
Tests for KOT routing and ticket rendering.
"""
from decimal import Decimal

import pytest

from cafe_pos.services.cart import LineItem
from cafe_pos.services.kot import (
    KOTMode,
    KOTPreference,
    StationMap,
    new_items_since,
    render_kot_ticket,
    route_items,
    ticket_heading,
)


def line(name, category, quantity=1, price="100", instruction=None):
    return LineItem(
        name=name,
        quantity=quantity,
        price=Decimal(price),
        category=category,
        instruction=instruction,
    )


@pytest.fixture
def order_items():
    return [
        line("Latte", "Beverages", 2, "89"),
        line("Brownie", "Desserts", 1, "120"),
        line("Alfredo Pasta (Veg)", "Pasta (Penne / Spaghetti)", 1, "229"),
        line("Masala Chai", "Beverages", 1, "80"),
    ]


DEFAULT_STATIONS = StationMap()


def titles(groups):
    return [group.title for group in groups]


def names(group):
    return [item.name for item in group.items]


class TestKOTPreference:
    def test_defaults_to_single(self):
        assert KOTPreference().type == KOTMode.SINGLE

    def test_unknown_type_routes_as_single(self):
        assert KOTPreference.from_config({"type": "by-moon-phase"}).type == KOTMode.SINGLE

    def test_categories_cleared_outside_category_mode(self):
        pref = KOTPreference.from_config({"type": "separate", "categories": ["Desserts"]})
        assert pref.categories == []

    def test_duplicate_categories_removed(self):
        pref = KOTPreference.from_config({"type": "category", "categories": ["Desserts", "Desserts"]})
        assert pref.categories == ["Desserts"]

    def test_non_mapping_config_is_single(self):
        assert KOTPreference.from_config("category").type == KOTMode.SINGLE
        assert KOTPreference.from_config(None).type == KOTMode.SINGLE

    def test_malformed_categories_keep_type(self):
        pref = KOTPreference.from_config({"type": "category", "categories": 42})
        assert pref.type == KOTMode.CATEGORY
        assert pref.categories == []


class TestRouteItems:
    def test_empty_order_has_no_groups(self):
        assert route_items([], {"type": "separate"}, DEFAULT_STATIONS) == []

    def test_single_mode_keeps_order(self, order_items):
        groups = route_items(order_items, {"type": "single"}, DEFAULT_STATIONS)
        assert titles(groups) == ["KOT"]
        assert names(groups[0]) == ["Latte", "Brownie", "Alfredo Pasta (Veg)", "Masala Chai"]

    def test_unknown_mode_matches_single(self, order_items):
        assert titles(route_items(order_items, {"type": "weird"}, DEFAULT_STATIONS)) == ["KOT"]

    def test_separate_mode_splits_kitchen_and_bar(self, order_items):
        groups = route_items(order_items, {"type": "separate"}, DEFAULT_STATIONS)
        assert titles(groups) == ["Kitchen KOT", "Bar KOT"]
        assert names(groups[0]) == ["Brownie", "Alfredo Pasta (Veg)"]
        assert names(groups[1]) == ["Latte", "Masala Chai"]

    def test_separate_mode_omits_empty_groups(self):
        groups = route_items([line("Latte", "Beverages")], {"type": "separate"}, DEFAULT_STATIONS)
        assert titles(groups) == ["Bar KOT"]

    def test_category_mode(self, order_items):
        pref = {"type": "category", "categories": ["Desserts"]}
        groups = route_items(order_items, pref, DEFAULT_STATIONS)
        assert titles(groups) == ["Kitchen KOT", "Bar KOT", "Desserts KOT"]
        assert names(groups[0]) == ["Alfredo Pasta (Veg)"]
        assert names(groups[2]) == ["Brownie"]

    def test_configured_category_takes_precedence_over_station(self, order_items):
        pref = {"type": "category", "categories": ["Beverages"]}
        groups = route_items(order_items, pref, DEFAULT_STATIONS)
        assert titles(groups) == ["Kitchen KOT", "Beverages KOT"]
        assert names(groups[1]) == ["Latte", "Masala Chai"]

    def test_configured_category_without_items_is_skipped(self, order_items):
        pref = {"type": "category", "categories": ["Pizza's", "Desserts"]}
        assert "Pizza's KOT" not in titles(route_items(order_items, pref, DEFAULT_STATIONS))

    @pytest.mark.parametrize("pref", [
        {"type": "single"},
        {"type": "separate"},
        {"type": "category", "categories": ["Desserts", "Beverages"]},
    ])
    def test_every_item_lands_in_exactly_one_group(self, order_items, pref):
        groups = route_items(order_items, pref, DEFAULT_STATIONS)
        routed = sorted(name for group in groups for name in names(group))
        assert routed == sorted(item.name for item in order_items)
        assert sum(item.quantity for group in groups for item in group.items) == 5

    def test_custom_station_map(self, order_items):
        stations = StationMap({"Beverages": "bar", "Desserts": "pastry"}, default_station="kitchen")
        groups = route_items(order_items, {"type": "separate"}, stations)
        assert titles(groups) == ["Kitchen KOT", "Bar KOT", "Pastry KOT"]

    def test_station_lookup_ignores_case(self):
        assert DEFAULT_STATIONS.station_for("  beverages ") == "bar"
        assert DEFAULT_STATIONS.station_for(None) == "kitchen"


class TestNewItemsSince:
    def test_new_lines_and_increments(self):
        current = [line("Latte", "Beverages", 3), line("Poha", "All Day Breakfast", 1)]
        sent = [line("Latte", "Beverages", 1)]
        pending = new_items_since(current, sent)
        assert [(item.name, item.quantity) for item in pending] == [("Latte", 2), ("Poha", 1)]

    def test_nothing_new(self):
        current = [line("Latte", "Beverages", 2)]
        assert new_items_since(current, current) == []


class TestRenderTicket:
    def test_dine_in_ticket(self):
        group = route_items([line("Poha", "All Day Breakfast", 2, instruction="less spicy")])[0]
        text = render_kot_ticket(group, order_number=7, order_type="Dine-In", table_id="4")
        lines = text.splitlines()
        assert lines[0] == "KOT"
        assert lines[1] == "Order ID: 007 | Table 4"
        assert "2 x Poha" in lines
        assert "   Note: less spicy" in lines

    def test_update_ticket_marks_increments(self):
        group = route_items([line("Latte", "Beverages", 1)], {"type": "separate"}, DEFAULT_STATIONS)[0]
        text = render_kot_ticket(group, order_number=12, table_id="2", is_update=True)
        assert text.startswith("UPDATE - Bar KOT")
        assert "+1 x Latte" in text.splitlines()

    @pytest.mark.parametrize("order_type,table_id,customer,expected", [
        ("Dine-In", "4", None, "Table 4"),
        ("Take-Away", None, None, "Take Away"),
        ("Home-Delivery", None, "Priya", "Priya"),
        ("Home-Delivery", None, None, "Home Delivery"),
        ("Dine-In", None, None, "Unassigned Order"),
    ])
    def test_ticket_heading(self, order_type, table_id, customer, expected):
        assert ticket_heading(order_type, table_id, customer) == expected
