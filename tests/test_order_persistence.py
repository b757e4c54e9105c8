"""
Tests for order submission, settlement, and venue settings persistence.
"""
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

import cafe_pos.services.order as order_service
from cafe_pos.models import DiningTable, Order, OrderItem
from cafe_pos.services.billing import create_bill
from cafe_pos.services.cart import LineItem
from cafe_pos.services.kot import KOTMode, KOTPreference
from cafe_pos.services.order import (
    ORDER_COMPLETED,
    ORDER_PENDING,
    TABLE_AVAILABLE,
    TABLE_CLEANING,
    TABLE_OCCUPIED,
    OrderAlreadySettledError,
    OrderNotFoundError,
    OrderSubmissionError,
    get_kot_preference,
    get_order,
    get_venue_name,
    order_lines,
    save_kot_preference,
    settle_order,
    submit_order,
)


@pytest.fixture
def lines():
    return [
        LineItem(name="Latte", quantity=2, price=Decimal("89"), category="Beverages", instruction="oat milk"),
        LineItem(name="Butter Toast", quantity=1, price=Decimal("99"), category="All Day Breakfast"),
    ]


class TestSubmitOrder:
    def test_creates_order_and_occupies_table(self, db_session, lines):
        order = submit_order(db_session, "4", lines)

        assert order.id is not None
        assert order.status == ORDER_PENDING
        assert [item.name for item in order.items] == ["Latte", "Butter Toast"]
        assert order.items[0].instruction == "oat milk"
        assert db_session.get(DiningTable, "4").status == TABLE_OCCUPIED

    def test_unknown_table_is_created_occupied(self, db_session, lines):
        submit_order(db_session, "T12", lines)
        assert db_session.get(DiningTable, "T12").status == TABLE_OCCUPIED

    def test_take_away_does_not_touch_tables(self, db_session, lines):
        order = submit_order(db_session, None, lines, order_type="Take-Away", customer_name="Ravi")
        assert order.table_id is None
        statuses = {table.status for table in db_session.query(DiningTable).all()}
        assert statuses == {TABLE_AVAILABLE}

    def test_table_write_failure_rolls_back_order(self, db_session, lines, monkeypatch):
        def failing_table_update(db, table_id, status):
            raise OperationalError("UPDATE dining_tables", {}, Exception("database is locked"))

        monkeypatch.setattr(order_service, "_set_table_status", failing_table_update)

        with pytest.raises(OrderSubmissionError) as exc_info:
            submit_order(db_session, "4", lines)

        assert exc_info.value.table_id == "4"
        assert "try again" in str(exc_info.value)
        assert db_session.query(Order).count() == 0
        assert db_session.query(OrderItem).count() == 0
        assert db_session.get(DiningTable, "4").status == TABLE_AVAILABLE

    def test_commit_failure_rolls_back(self, db_session, lines, monkeypatch):
        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        with monkeypatch.context() as m:
            m.setattr(db_session, "commit", failing_commit)
            with pytest.raises(OrderSubmissionError):
                submit_order(db_session, "4", lines)

        assert db_session.query(Order).count() == 0
        assert db_session.get(DiningTable, "4").status == TABLE_AVAILABLE


class TestOrderLookup:
    def test_get_order_round_trips_lines(self, db_session, lines):
        order = submit_order(db_session, "2", lines)
        loaded = get_order(db_session, order.id)
        rebuilt = order_lines(loaded)
        assert [(line.name, line.quantity, line.price) for line in rebuilt] == [
            ("Latte", 2, Decimal("89.00")),
            ("Butter Toast", 1, Decimal("99.00")),
        ]
        assert rebuilt[0].category == "Beverages"

    def test_missing_order_raises(self, db_session):
        with pytest.raises(OrderNotFoundError):
            get_order(db_session, 999)


class TestSettleOrder:
    def test_settlement_freezes_totals_and_frees_table(self, db_session, lines):
        order = submit_order(db_session, "4", lines)
        bill = create_bill(order_lines(order), 10, Decimal("0.05"), table_id="4")

        settled = settle_order(db_session, order, bill, "receipt text")

        assert settled.status == ORDER_COMPLETED
        assert settled.completed_at is not None
        assert settled.total == bill.total
        assert settled.discount_amount == Decimal("27.70")
        assert settled.receipt_text == "receipt text"
        assert db_session.get(DiningTable, "4").status == TABLE_CLEANING

    def test_settlement_failure_keeps_order_pending(self, db_session, lines, monkeypatch):
        order = submit_order(db_session, "4", lines)
        bill = create_bill(order_lines(order), 0, Decimal("0.05"))

        def failing_table_update(db, table_id, status):
            raise OperationalError("UPDATE dining_tables", {}, Exception("database is locked"))

        monkeypatch.setattr(order_service, "_set_table_status", failing_table_update)

        with pytest.raises(OrderSubmissionError):
            settle_order(db_session, order, bill, "receipt text")

        db_session.expire_all()
        assert get_order(db_session, order.id).status == ORDER_PENDING
        assert db_session.get(DiningTable, "4").status == TABLE_OCCUPIED

    def test_second_settlement_of_same_order_is_refused(self, session_factory, db_session, lines):
        order = submit_order(db_session, "4", lines)

        # Another till loaded the same pending order before this one settled it
        other_till = session_factory()
        try:
            stale = get_order(other_till, order.id)
            assert stale.status == ORDER_PENDING

            first_bill = create_bill(order_lines(order), 10, Decimal("0.05"), table_id="4")
            settle_order(db_session, order, first_bill, "first receipt")

            second_bill = create_bill(order_lines(stale), 0, Decimal("0.05"), table_id="4")
            with pytest.raises(OrderAlreadySettledError) as exc_info:
                settle_order(other_till, stale, second_bill, "second receipt")
            assert exc_info.value.order_id == order.id
        finally:
            other_till.close()

        db_session.expire_all()
        stored = get_order(db_session, order.id)
        assert stored.status == ORDER_COMPLETED
        assert stored.discount_percent == Decimal("10")
        assert stored.total == first_bill.total
        assert stored.receipt_text == "first receipt"
        assert db_session.get(DiningTable, "4").status == TABLE_CLEANING


class TestVenueSettings:
    def test_default_kot_preference_is_single(self, db_session):
        assert get_kot_preference(db_session).type == KOTMode.SINGLE

    def test_kot_preference_round_trip(self, db_session):
        save_kot_preference(db_session, KOTPreference(type="category", categories=["Pizza's"]))
        pref = get_kot_preference(db_session)
        assert pref.type == KOTMode.CATEGORY
        assert pref.categories == ["Pizza's"]

    def test_venue_name_defaults_to_config(self, db_session, monkeypatch):
        import cafe_pos.config as config_mod

        monkeypatch.setattr(config_mod, "VENUE_NAME", "Test Cafe")
        assert get_venue_name(db_session) == "Test Cafe"
