"""
Services Package for Cafe POS
=============================

Business logic for the order fulfillment pipeline, leaves first:

- **stock**: Availability classification of menu items and categories
- **cart**: Cart aggregation with availability gating
- **kot**: Kitchen Order Ticket routing and ticket rendering
- **billing**: Subtotal / discount / tax / total with Decimal money
- **receipt**: Local receipt template and generator fallback handling
- **order**: Order persistence (submission, settlement, KOT preference)
- **menu**: Menu lookups and stock status updates

The pure modules (stock, cart, kot, billing) have no I/O. receipt may call
the LLM through llm_client; order and menu take a SQLAlchemy session.

Usage:
------
    from cafe_pos.services.kot import route_items, KOTPreference
    from cafe_pos.services.billing import compute_bill
    from cafe_pos.services.receipt import resolve_receipt
"""

from . import stock
from . import cart
from . import kot
from . import billing

__all__ = ["stock", "cart", "kot", "billing"]
