"""
Menu Routes for Cafe POS
========================

Endpoints for browsing the menu and flipping stock flags during service.

Endpoints:
----------
- GET /menu: Categories with their items (optional ?veg=all|veg|non-veg)
- GET /menu/items/by-code/{code}: Quick-entry lookup by item code
- GET /menu/stock-alerts: Items running low or out of stock
- PUT /menu/items/{name}/status: Set an item's stock flag (?category= when the
  name is shared by several categories)
- PUT /menu/categories/{name}/status: Set a whole category's stock flag

Availability:
-------------
Every item in a menu response carries both the gating ``availability``
(what the cart enforces) and the display ``badge``. Marking a category
unavailable makes all of its items unavailable regardless of their own
flags; clearing it restores each item's own state.

Usage:
------
    # 86 the pizza oven
    PUT /menu/categories/Pizza's/status
    {"status": "unavailable"}
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import MenuCategory, MenuItem
from ..schemas.menu import (
    MenuCategoryOut,
    MenuItemOut,
    StatusUpdate,
    StockAlertItem,
    StockAlertsOut,
)
from ..services.menu import (
    VEG_FILTERS,
    AmbiguousMenuItemError,
    filtered_menu,
    find_category,
    find_menu_item,
    find_menu_item_by_code,
    list_categories,
    set_category_status,
    set_item_status,
)
from ..services.stock import badge_state, classify, low_stock_items, out_of_stock_items

logger = logging.getLogger(__name__)

menu_router = APIRouter(prefix="/menu", tags=["Menu"])


# =============================================================================
# Helper Functions
# =============================================================================

def serialize_menu_item(item: MenuItem, category: MenuCategory) -> MenuItemOut:
    """Convert a MenuItem row to its response schema, resolving availability."""
    return MenuItemOut(
        name=item.name,
        code=item.code,
        price=item.price,
        is_vegetarian=item.is_vegetarian,
        status=item.status,
        availability=classify(item.status, category.status),
        badge=badge_state(item.status, category.status),
    )


def serialize_category(category: MenuCategory, items: List[MenuItem]) -> MenuCategoryOut:
    return MenuCategoryOut(
        name=category.name,
        status=category.status,
        items=[serialize_menu_item(item, category) for item in items],
    )


def _alert_items(items: List[MenuItem]) -> List[StockAlertItem]:
    return [StockAlertItem(name=item.name, category=item.category.name) for item in items]


# =============================================================================
# Menu Endpoints
# =============================================================================

@menu_router.get("", response_model=List[MenuCategoryOut])
def get_menu(
    veg: str = Query("all", description="Filter: all, veg, or non-veg"),
    db: Session = Depends(get_db),
) -> List[MenuCategoryOut]:
    """List categories in display order, each with its (filtered) items."""
    veg_filter = veg.strip().lower()
    if veg_filter not in VEG_FILTERS:
        raise HTTPException(
            status_code=400,
            detail=f"veg must be one of: {', '.join(VEG_FILTERS)}",
        )
    return [serialize_category(category, items) for category, items in filtered_menu(db, veg_filter)]


@menu_router.get("/items/by-code/{code}", response_model=MenuItemOut)
def get_menu_item_by_code(code: str, db: Session = Depends(get_db)) -> MenuItemOut:
    item = find_menu_item_by_code(db, code)
    if not item:
        raise HTTPException(status_code=404, detail=f"No menu item with code {code}")
    return serialize_menu_item(item, item.category)


@menu_router.get("/stock-alerts", response_model=StockAlertsOut)
def get_stock_alerts(db: Session = Depends(get_db)) -> StockAlertsOut:
    """Items the floor staff should know about before taking orders."""
    categories = list_categories(db)
    return StockAlertsOut(
        low=_alert_items(low_stock_items(categories)),
        out=_alert_items(out_of_stock_items(categories)),
    )


@menu_router.put("/items/{name}/status", response_model=MenuItemOut)
def update_item_status(
    name: str,
    payload: StatusUpdate,
    category: Optional[str] = Query(None, description="Needed when the name is in several categories"),
    db: Session = Depends(get_db),
) -> MenuItemOut:
    try:
        item = find_menu_item(db, name, category)
    except AmbiguousMenuItemError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail=f"Menu item '{name}' not found")
    item = set_item_status(db, item, payload.status)
    return serialize_menu_item(item, item.category)


@menu_router.put("/categories/{name}/status", response_model=MenuCategoryOut)
def update_category_status(
    name: str,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
) -> MenuCategoryOut:
    category = find_category(db, name)
    if not category:
        raise HTTPException(status_code=404, detail=f"Category '{name}' not found")
    category = set_category_status(db, category, payload.status)
    return serialize_category(category, list(category.items))
