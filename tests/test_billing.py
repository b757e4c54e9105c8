"""
Tests for bill calculation.
"""
from decimal import Decimal

import pytest

from cafe_pos.services.billing import (
    InsufficientPaymentError,
    change_due,
    clamp_discount,
    compute_bill,
    create_bill,
    format_percent,
    round_money,
)
from cafe_pos.services.cart import LineItem


@pytest.fixture
def items():
    return [
        LineItem(name="Latte", quantity=2, price=Decimal("89"), category="Beverages"),
        LineItem(name="Croissant", quantity=1, price=Decimal("90"), category="Bakery"),
    ]


class TestComputeBill:
    def test_discount_and_tax_on_pre_discount_subtotal(self, items):
        totals = compute_bill(items, 10, Decimal("0.05"), tax_on_discounted_subtotal=False)
        assert totals.subtotal == Decimal("268.00")
        assert totals.discount_amount == Decimal("26.80")
        assert totals.tax_amount == Decimal("13.40")
        assert totals.total == Decimal("254.60")
        assert totals.has_discount

    def test_tax_on_discounted_subtotal(self, items):
        totals = compute_bill(items, 10, Decimal("0.05"), tax_on_discounted_subtotal=True)
        assert totals.tax_amount == Decimal("12.06")
        assert totals.total == Decimal("253.26")

    def test_no_discount(self, items):
        totals = compute_bill(items, 0, Decimal("0"))
        assert totals.discount_amount == Decimal("0.00")
        assert totals.total == Decimal("268.00")
        assert not totals.has_discount

    def test_discount_above_ceiling_is_clamped(self, items):
        totals = compute_bill(items, 35, Decimal("0"))
        assert totals.discount_percent == Decimal("20")
        assert totals.discount_amount == Decimal("53.60")

    def test_default_tax_rate_comes_from_config(self, items, monkeypatch):
        import cafe_pos.config as config_mod

        monkeypatch.setattr(config_mod, "TAX_RATE", Decimal("0.10"))
        monkeypatch.setattr(config_mod, "TAX_ON_DISCOUNTED_SUBTOTAL", False)
        assert compute_bill(items).tax_amount == Decimal("26.80")

    def test_empty_bill(self):
        totals = compute_bill([], 10, Decimal("0.05"))
        assert totals.total == Decimal("0.00")


class TestDiscountClamping:
    @pytest.mark.parametrize("requested,expected", [
        (10, Decimal("10")),
        (35, Decimal("20")),
        (-5, Decimal("0")),
        ("12.5", Decimal("12.5")),
        (None, Decimal("0")),
        ("lots", Decimal("0")),
    ])
    def test_clamp(self, requested, expected):
        assert clamp_discount(requested) == expected

    def test_custom_ceiling(self):
        assert clamp_discount(50, maximum=Decimal("30")) == Decimal("30")


class TestMoneyHelpers:
    def test_round_half_up(self):
        assert round_money(Decimal("0.005")) == Decimal("0.01")
        assert round_money(Decimal("2.675")) == Decimal("2.68")

    def test_float_input_has_no_binary_artifacts(self):
        assert round_money(0.1 + 0.2) == Decimal("0.30")

    @pytest.mark.parametrize("percent,expected", [
        (Decimal("10"), "10"),
        (Decimal("10.00"), "10"),
        (Decimal("12.5"), "12.5"),
        (Decimal("0"), "0"),
    ])
    def test_format_percent(self, percent, expected):
        assert format_percent(percent) == expected


class TestCreateBill:
    def test_bill_lines_are_snapshots(self, items):
        bill = create_bill(items, 10, Decimal("0.05"), table_id="4")
        items[0].quantity = 5
        assert bill.lines[0].quantity == 2
        assert bill.table_id == "4"
        assert bill.created_at.tzinfo is not None

    def test_total_property(self, items):
        bill = create_bill(items, 0, Decimal("0.05"))
        assert bill.total == bill.totals.total == Decimal("281.40")


class TestChangeDue:
    def test_change(self):
        assert change_due(Decimal("254.60"), 300) == Decimal("45.40")

    def test_exact_amount(self):
        assert change_due(Decimal("254.60"), "254.60") == Decimal("0.00")

    def test_short_payment_raises(self):
        with pytest.raises(InsufficientPaymentError) as exc_info:
            change_due(Decimal("254.60"), 200)
        assert exc_info.value.total == Decimal("254.60")
        assert exc_info.value.received == Decimal("200.00")
