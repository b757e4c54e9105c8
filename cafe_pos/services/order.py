"""
Order Persistence Service for Cafe POS
======================================

Key Functions:
--------------
- submit_order: Record a new order and mark its table occupied
- settle_order: Store the frozen bill and receipt, free the table for cleaning
- get_kot_preference / save_kot_preference: Venue-wide KOT routing setting
- get_venue_name: Receipt header, stored or configured

Atomicity:
----------
Submitting an order touches two rows: the new order (with its items) and
the table's occupancy status. Both happen in one transaction, committed
once. If either write fails the whole submission is rolled back, so an
order is never recorded against a table that was not marked occupied.
Settlement works the same way, and its write only applies while the order
is still pending: when two tills settle one order, the second gets
OrderAlreadySettledError and the first bill stands.

Failures surface as OrderSubmissionError after rollback. There is no
automatic retry; the caller keeps its cart so the user can try again.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import config
from ..models import DiningTable, Order, OrderItem, VenueSettings
from .billing import Bill
from .cart import LineItem
from .kot import KOTPreference

logger = logging.getLogger(__name__)

TABLE_AVAILABLE = "Available"
TABLE_OCCUPIED = "Occupied"
TABLE_CLEANING = "Cleaning"

ORDER_PENDING = "pending"
ORDER_COMPLETED = "completed"


class OrderSubmissionError(Exception):
    """Raised when an order (or its table update) could not be written."""

    def __init__(self, message: str, table_id: Optional[str] = None):
        self.table_id = table_id
        super().__init__(message)


class OrderNotFoundError(Exception):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class OrderAlreadySettledError(Exception):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} is already settled")


def _set_table_status(db: Session, table_id: str, status: str) -> DiningTable:
    """Upsert a table's status (merge semantics: unknown tables are created)."""
    table = db.get(DiningTable, table_id)
    if table is None:
        table = DiningTable(id=table_id, status=status)
        db.add(table)
    else:
        table.status = status
    return table


def submit_order(
    db: Session,
    table_id: Optional[str],
    items: Iterable[LineItem],
    order_type: str = "Dine-In",
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
) -> Order:
    """
    Create a pending order and mark its table occupied, atomically.

    Args:
        db: Database session
        table_id: Table the order belongs to (None for take-away/delivery)
        items: Order lines
        order_type: Dine-In / Take-Away / Home-Delivery
        customer_name: Optional customer name
        customer_phone: Optional customer phone

    Returns:
        The persisted Order

    Raises:
        OrderSubmissionError: if any write fails (nothing is left behind)
    """
    lines = list(items)
    try:
        order = Order(
            table_id=table_id,
            order_type=order_type,
            status=ORDER_PENDING,
            customer_name=customer_name,
            customer_phone=customer_phone,
            created_at=datetime.now(timezone.utc),
        )
        for position, line in enumerate(lines):
            order.items.append(OrderItem(
                position=position,
                name=line.name,
                category=line.category,
                quantity=line.quantity,
                unit_price=line.price,
                instruction=line.instruction,
            ))
        db.add(order)

        if table_id:
            _set_table_status(db, table_id, TABLE_OCCUPIED)

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error placing order for table %s: %s", table_id, e)
        raise OrderSubmissionError(
            "Could not place your order. Please try again or ask for help.",
            table_id=table_id,
        ) from e

    db.refresh(order)
    logger.info("Order %s placed for table %s with %d lines", order.id, table_id, len(lines))
    return order


def get_order(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


def order_lines(order: Order) -> List[LineItem]:
    """Rebuild cart lines from a stored order."""
    return [
        LineItem(
            name=item.name,
            quantity=item.quantity,
            price=item.unit_price,
            category=item.category,
            instruction=item.instruction,
        )
        for item in order.items
    ]


def settle_order(db: Session, order: Order, bill: Bill, receipt_text: str) -> Order:
    """
    Write the bill snapshot onto the order, complete it, and send the table to cleaning.

    The snapshot is written with a single UPDATE guarded on the order still
    being pending, so of two tills settling the same order only one wins.

    Raises:
        OrderAlreadySettledError: if the order was completed by someone else first
        OrderSubmissionError: if the writes fail (rolled back together)
    """
    totals = bill.totals
    order_id = order.id
    try:
        result = db.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == ORDER_PENDING)
            .values(
                subtotal=totals.subtotal,
                discount_percent=totals.discount_percent,
                discount_amount=totals.discount_amount,
                tax_amount=totals.tax_amount,
                total=totals.total,
                receipt_text=receipt_text,
                status=ORDER_COMPLETED,
                completed_at=bill.created_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
            logger.warning("Order %s was already settled; keeping the stored bill", order_id)
            raise OrderAlreadySettledError(order_id)

        if order.table_id:
            _set_table_status(db, order.table_id, TABLE_CLEANING)

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error settling order %s: %s", order_id, e)
        raise OrderSubmissionError(
            "Could not record the payment. Please try again.",
            table_id=order.table_id,
        ) from e

    db.refresh(order)
    logger.info("Order %s settled, total %s", order.id, totals.total)
    return order


def get_venue_name(db: Session) -> str:
    """Receipt header: the stored venue name, else the configured default."""
    settings = db.query(VenueSettings).first()
    if settings is not None and settings.venue_name:
        return settings.venue_name
    return config.VENUE_NAME


def get_kot_preference(db: Session) -> KOTPreference:
    settings = db.query(VenueSettings).first()
    if settings is None:
        return KOTPreference()
    return KOTPreference.from_config({"type": settings.kot_type, "categories": settings.kot_categories})


def save_kot_preference(db: Session, preference: KOTPreference) -> KOTPreference:
    settings = db.query(VenueSettings).first()
    if settings is None:
        settings = VenueSettings()
        db.add(settings)
    settings.kot_type = preference.type.value
    settings.kot_categories = list(preference.categories)
    db.commit()
    logger.info("KOT preference set to %s %s", preference.type.value, preference.categories)
    return preference
