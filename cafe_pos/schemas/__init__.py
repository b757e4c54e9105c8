"""
Schemas Package for Cafe POS
============================

Pydantic models used for API request validation and response serialization.

Schema Organization:
--------------------
- **menu.py**: Menu listing, stock alerts, status updates
- **kot.py**: Ticket routing requests and responses
- **bills.py**: Bill preview and totals
- **orders.py**: Order submission, detail, and settlement
- **receipt.py**: Receipt generator payload and response

Naming Conventions:
-------------------
- *Out: Response models (e.g., OrderOut)
- *Create: Request models for POST (e.g., OrderCreate)
- *Request / *Response: Other request and response bodies
"""

from .menu import (
    MenuItemOut,
    MenuCategoryOut,
    StockAlertItem,
    StockAlertsOut,
    StatusUpdate,
)
from .receipt import ReceiptLine, ReceiptInput, ReceiptPreview, ReceiptOut
from .bills import BillPreviewRequest, BillOut, BillPreviewResponse
from .kot import KOTRouteRequest, KOTGroupOut, KOTRouteResponse, OrderKOTResponse
from .orders import (
    OrderLineIn,
    OrderCreate,
    OrderItemOut,
    OrderOut,
    KOTUpdateRequest,
    SettleRequest,
    SettleResponse,
)

__all__ = [
    "MenuItemOut",
    "MenuCategoryOut",
    "StockAlertItem",
    "StockAlertsOut",
    "StatusUpdate",
    "ReceiptLine",
    "ReceiptInput",
    "ReceiptPreview",
    "ReceiptOut",
    "BillPreviewRequest",
    "BillOut",
    "BillPreviewResponse",
    "KOTRouteRequest",
    "KOTGroupOut",
    "KOTRouteResponse",
    "OrderKOTResponse",
    "OrderLineIn",
    "OrderCreate",
    "OrderItemOut",
    "OrderOut",
    "KOTUpdateRequest",
    "SettleRequest",
    "SettleResponse",
]
