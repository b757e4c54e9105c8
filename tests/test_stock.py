"""
Tests for stock availability classification.
"""
from types import SimpleNamespace

from cafe_pos.services.stock import (
    AvailabilityState,
    badge_state,
    classify,
    classify_item,
    low_stock_items,
    out_of_stock_items,
    parse_status,
)


class TestClassify:
    def test_no_flags_is_available(self):
        assert classify(None, None) == AvailabilityState.AVAILABLE

    def test_category_unavailable_dominates_item_flag(self):
        assert classify("available", "unavailable") == AvailabilityState.UNAVAILABLE
        assert classify("low", "unavailable") == AvailabilityState.UNAVAILABLE

    def test_item_unavailable_wins_over_low_category(self):
        assert classify("unavailable", "low") == AvailabilityState.UNAVAILABLE

    def test_low_on_either_side(self):
        assert classify("low", None) == AvailabilityState.LOW
        assert classify(None, "low") == AvailabilityState.LOW
        assert classify("available", "low") == AvailabilityState.LOW

    def test_out_is_an_alias_for_unavailable(self):
        assert parse_status("out") == AvailabilityState.UNAVAILABLE
        assert classify("out") == AvailabilityState.UNAVAILABLE

    def test_unknown_status_counts_as_unset(self):
        assert parse_status("sold-ish") is None
        assert classify("sold-ish", None) == AvailabilityState.AVAILABLE

    def test_status_parsing_ignores_case_and_whitespace(self):
        assert parse_status("  LOW ") == AvailabilityState.LOW


class TestBadge:
    def test_badge_prefers_item_flag(self):
        # Gating says unavailable, but the item's own badge still reads low
        assert classify("low", "unavailable") == AvailabilityState.UNAVAILABLE
        assert badge_state("low", "unavailable") == AvailabilityState.LOW

    def test_badge_falls_back_to_category(self):
        assert badge_state(None, "unavailable") == AvailabilityState.UNAVAILABLE
        assert badge_state(None, None) == AvailabilityState.AVAILABLE


class TestStockAlerts:
    def _categories(self):
        breakfast = SimpleNamespace(name="All Day Breakfast", status=None)
        breakfast.items = [
            SimpleNamespace(name="Poha", status="low"),
            SimpleNamespace(name="Curd", status="out"),
            SimpleNamespace(name="French Toast", status=None),
        ]
        pizza = SimpleNamespace(name="Pizza's", status="unavailable")
        pizza.items = [SimpleNamespace(name="Margherita (Medium)", status="low")]
        drinks = SimpleNamespace(name="Beverages", status="low")
        drinks.items = [SimpleNamespace(name="Latte", status=None)]
        return [breakfast, pizza, drinks]

    def test_low_stock_includes_category_level_low(self):
        names = [item.name for item in low_stock_items(self._categories())]
        assert names == ["Poha", "Latte"]

    def test_out_of_stock_includes_unavailable_categories(self):
        names = [item.name for item in out_of_stock_items(self._categories())]
        assert names == ["Curd", "Margherita (Medium)"]

    def test_classify_item_without_category(self):
        item = SimpleNamespace(name="Latte", status="low")
        assert classify_item(item) == AvailabilityState.LOW
