"""
Bill Routes for Cafe POS
========================

Endpoints:
----------
- POST /bills/preview: Totals and receipt text for a cart, without an order

Rate Limiting:
--------------
Previews can call the receipt generator, so they are limited per client IP
(RATE_LIMIT_RECEIPT, default "20 per minute"). Exceeding the limit returns
HTTP 429. Set RATE_LIMIT_ENABLED=false to disable.
"""

import asyncio
import logging
from typing import Tuple

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from ..config import RATE_LIMIT_ENABLED, get_rate_limit_receipt
from ..db import get_db
from ..schemas.bills import BillOut, BillPreviewRequest, BillPreviewResponse
from ..schemas.receipt import ReceiptInput, ReceiptOut
from ..services.billing import BillTotals, compute_bill
from ..services.order import get_venue_name
from ..services.receipt import build_receipt_input, resolve_receipt

logger = logging.getLogger(__name__)

bills_router = APIRouter(prefix="/bills", tags=["Bills"])

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


def _preview_inputs(db: Session, payload: BillPreviewRequest) -> Tuple[BillTotals, ReceiptInput]:
    totals = compute_bill(payload.items, payload.discount_percent)
    receipt_input = build_receipt_input(
        payload.items,
        totals,
        venue_name=payload.venue_name or get_venue_name(db),
    )
    return totals, receipt_input


@bills_router.post("/preview", response_model=BillPreviewResponse)
@limiter.limit(get_rate_limit_receipt)
async def preview_bill(
    request: Request,
    payload: BillPreviewRequest,
    db: Session = Depends(get_db),
) -> BillPreviewResponse:
    """Compute totals and a receipt for the given lines. Nothing is stored."""
    # Venue name lookup hits the database; keep it off the event loop
    totals, receipt_input = await asyncio.to_thread(_preview_inputs, db, payload)
    receipt = await resolve_receipt(receipt_input)
    logger.debug("Bill preview for %d lines: total %s (%s receipt)", len(payload.items), totals.total, receipt.source)
    return BillPreviewResponse(
        bill=BillOut.from_totals(totals),
        receipt=ReceiptOut(text=receipt.text, source=receipt.source),
    )
