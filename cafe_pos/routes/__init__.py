"""
Routes Package for Cafe POS
===========================

Each module defines a FastAPI APIRouter for one area of the till:

- menu.py: Menu listing, quick-entry codes, stock flags and alerts
- kot.py: Ticket routing preview and the venue KOT preference
- orders.py: Order submission, tickets, and settlement
- bills.py: Rate-limited bill and receipt preview

Router Registration:
--------------------
All routers are registered in main.py under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Root paths for the till frontend

Error Handling:
---------------
Routes translate service exceptions into HTTPException:
- 400: Bad request (short cash payment, bad filter)
- 404: Not found (order id, menu item, category)
- 409: Conflict (unavailable item, order already settled)
- 429: Too many requests (rate limited)
- 503: Service unavailable (database write failed)
"""

from .menu import menu_router
from .kot import kot_router
from .orders import orders_router
from .bills import bills_router, limiter

__all__ = [
    "menu_router",
    "kot_router",
    "orders_router",
    "bills_router",
    "limiter",
]
