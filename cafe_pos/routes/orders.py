"""
Order Routes for Cafe POS
=========================

This module contains the endpoints that carry an order from cart submission
through kitchen tickets to settlement.

Endpoints:
----------
- POST /orders: Submit a cart as a pending order (table becomes Occupied)
- GET /orders/{order_id}: Order detail
- GET /orders/{order_id}/kot: Ticket groups for the whole order
- POST /orders/{order_id}/kot/update: Tickets for lines added since the last send
- POST /orders/{order_id}/settle: Bill, receipt, and payment (table becomes Cleaning)

Order Flow:
-----------
1. Lines are checked against the menu; unavailable items are refused (409)
2. Unit prices are snapshotted from the menu at submission
3. Order and table status are written in one transaction
4. On settlement the bill is frozen onto the order with its receipt text

Error Handling:
---------------
- 404: Unknown order id or menu item
- 409: Item unavailable, item name shared by several categories, or order
  already settled (including by another till mid-settlement)
- 400: Cash payment short of the total
- 503: The database write failed; nothing was recorded
"""

import asyncio
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Order
from ..schemas.bills import BillOut
from ..schemas.kot import KOTGroupOut, OrderKOTResponse
from ..schemas.orders import (
    KOTUpdateRequest,
    OrderCreate,
    OrderOut,
    SettleRequest,
    SettleResponse,
)
from ..schemas.receipt import ReceiptInput, ReceiptOut
from ..services.billing import Bill, InsufficientPaymentError, change_due, create_bill
from ..services.cart import Cart, ItemUnavailableError, LineItem, add_to_cart
from ..services.kot import new_items_since, render_kot_ticket, route_items
from ..services.menu import AmbiguousMenuItemError, find_menu_item
from ..services.order import (
    ORDER_COMPLETED,
    OrderAlreadySettledError,
    OrderNotFoundError,
    OrderSubmissionError,
    get_kot_preference,
    get_order,
    get_venue_name,
    order_lines,
    settle_order,
    submit_order,
)
from ..services.receipt import build_receipt_input, resolve_receipt

logger = logging.getLogger(__name__)

orders_router = APIRouter(prefix="/orders", tags=["Orders"])


# =============================================================================
# Helper Functions
# =============================================================================

def _load_order(db: Session, order_id: int) -> Order:
    try:
        return get_order(db, order_id)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _ticket_groups(
    db: Session,
    order: Order,
    lines: List[LineItem],
    is_update: bool = False,
) -> List[KOTGroupOut]:
    groups = route_items(lines, get_kot_preference(db))
    return [
        KOTGroupOut(
            title=group.title,
            items=group.items,
            ticket=render_kot_ticket(
                group,
                order_number=order.id,
                order_type=order.order_type,
                table_id=order.table_id,
                customer_name=order.customer_name,
                is_update=is_update,
            ),
        )
        for group in groups
    ]


def _prepare_settlement(
    db: Session,
    order_id: int,
    payload: SettleRequest,
) -> Tuple[Order, Bill, Optional[Decimal], ReceiptInput]:
    order = _load_order(db, order_id)
    if order.status == ORDER_COMPLETED:
        raise HTTPException(status_code=409, detail=f"Order {order_id} is already settled")

    bill = create_bill(order_lines(order), payload.discount_percent, table_id=order.table_id)

    change: Optional[Decimal] = None
    if payload.payment_method == "cash":
        if payload.cash_received is None:
            raise HTTPException(status_code=400, detail="cash_received is required for cash payments")
        try:
            change = change_due(bill.total, payload.cash_received)
        except InsufficientPaymentError as e:
            raise HTTPException(status_code=400, detail=str(e))

    receipt_input = build_receipt_input(
        bill.lines,
        bill.totals,
        venue_name=payload.venue_name or get_venue_name(db),
    )
    return order, bill, change, receipt_input


def _record_settlement(db: Session, order: Order, bill: Bill, receipt_text: str) -> OrderOut:
    try:
        order = settle_order(db, order, bill, receipt_text)
    except OrderAlreadySettledError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OrderSubmissionError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return OrderOut.model_validate(order)


# =============================================================================
# Order Endpoints
# =============================================================================

@orders_router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)) -> OrderOut:
    """
    Submit an order.

    Repeated names in the payload merge into one line, as they would in a
    cart. Dine-in orders need a table.
    """
    if payload.order_type == "Dine-In" and not payload.table_id:
        raise HTTPException(status_code=400, detail="Dine-In orders need a table_id")

    cart = Cart()
    for line in payload.items:
        try:
            menu_item = find_menu_item(db, line.name, line.category)
        except AmbiguousMenuItemError as e:
            raise HTTPException(status_code=409, detail=str(e))
        if not menu_item:
            raise HTTPException(status_code=404, detail=f"Menu item '{line.name}' not found")
        try:
            add_to_cart(cart, menu_item, menu_item.category, line.quantity)
        except ItemUnavailableError as e:
            raise HTTPException(status_code=409, detail=str(e))
        if line.instruction:
            cart.set_instruction(menu_item.name, line.instruction)

    try:
        order = submit_order(
            db,
            table_id=payload.table_id,
            items=cart.lines,
            order_type=payload.order_type,
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
        )
    except OrderSubmissionError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return OrderOut.model_validate(order)


@orders_router.get("/{order_id}", response_model=OrderOut)
def read_order(order_id: int, db: Session = Depends(get_db)) -> OrderOut:
    return OrderOut.model_validate(_load_order(db, order_id))


@orders_router.get("/{order_id}/kot", response_model=OrderKOTResponse)
def order_kot(order_id: int, db: Session = Depends(get_db)) -> OrderKOTResponse:
    """Ticket groups for every line of the order, routed by the saved preference."""
    order = _load_order(db, order_id)
    return OrderKOTResponse(
        order_id=order.id,
        is_update=False,
        groups=_ticket_groups(db, order, order_lines(order)),
    )


@orders_router.post("/{order_id}/kot/update", response_model=OrderKOTResponse)
def order_kot_update(
    order_id: int,
    payload: KOTUpdateRequest,
    db: Session = Depends(get_db),
) -> OrderKOTResponse:
    """Tickets for new lines and quantity increases only."""
    order = _load_order(db, order_id)
    pending = new_items_since(order_lines(order), payload.sent)
    return OrderKOTResponse(
        order_id=order.id,
        is_update=True,
        groups=_ticket_groups(db, order, pending, is_update=True),
    )


@orders_router.post("/{order_id}/settle", response_model=SettleResponse)
async def settle(
    order_id: int,
    payload: SettleRequest,
    db: Session = Depends(get_db),
) -> SettleResponse:
    """
    Compute the bill, produce the receipt, take payment, and close the order.

    The receipt falls back to the local template when the generator is
    unavailable, so settlement never waits on it beyond its deadline.
    Database work runs in a worker thread; only the receipt is awaited on
    the event loop. If another till settles the order while the receipt is
    being produced, this request gets 409 and the first bill stands.
    """
    order, bill, change, receipt_input = await asyncio.to_thread(
        _prepare_settlement, db, order_id, payload
    )
    receipt = await resolve_receipt(receipt_input)
    order_out = await asyncio.to_thread(_record_settlement, db, order, bill, receipt.text)

    logger.info(
        "Order %s paid by %s (receipt: %s)", order_out.id, payload.payment_method, receipt.source
    )
    return SettleResponse(
        order=order_out,
        bill=BillOut.from_totals(bill.totals),
        receipt=ReceiptOut(text=receipt.text, source=receipt.source),
        change_due=change,
    )
