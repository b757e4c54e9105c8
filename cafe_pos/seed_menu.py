"""
Seed the default cafe menu and dining tables.

Item codes are assigned sequentially across the whole menu ("01", "02", ...)
in the order below, for quick entry at the till. Seeding is skipped when the
menu already has items.

Usage:
    cafe-pos-seed
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from .db import SessionLocal
from .models import DiningTable, MenuCategory, MenuItem
from .services.order import TABLE_AVAILABLE

logger = logging.getLogger(__name__)

# (category, [(item name, price, vegetarian)])
DEFAULT_MENU: List[Tuple[str, List[Tuple[str, str, bool]]]] = [
    ("All Day Breakfast", [
        ("Aloo Parantha", "49", True),
        ("Paneer Parantha", "69", True),
        ("Egg Parantha", "89", False),
        ("Plain Omelette", "129", False),
        ("Cheese Omelette", "159", False),
        ("Butter Toast", "99", True),
        ("French Toast", "129", True),
        ("Poha", "139", True),
    ]),
    ("Beverages", [
        ("Espresso", "95", True),
        ("Americano", "125", True),
        ("Latte", "89", True),
        ("Cappuccino", "89", True),
        ("Cold Brew", "155", True),
        ("Masala Chai", "80", True),
        ("Hot Chocolate", "150", True),
        ("Fresh Lime Soda", "120", True),
        ("Oreo Milkshake", "200", True),
    ]),
    ("Pizza's", [
        ("Margherita (Medium)", "299", True),
        ("Margherita (Large)", "399", True),
        ("Loaded Paneer (Medium)", "379", True),
        ("Loaded Chicken (Medium)", "389", False),
    ]),
    ("Pasta (Penne / Spaghetti)", [
        ("Alfredo Pasta (Veg)", "229", True),
        ("Alfredo Pasta (Non-Veg)", "329", False),
        ("Arrabiatta Pasta (Veg)", "229", True),
    ]),
    ("Sandwiches", [
        ("Bombay Sandwich", "139", True),
        ("Veg Grilled Cheese", "179", True),
        ("Mayo Chicken", "239", False),
    ]),
    ("Garlic Bread", [
        ("Plain Garlic Bread", "149", True),
        ("Cheese Garlic Bread", "209", True),
        ("Chicken Bruschetta", "249", False),
    ]),
    ("Burger's", [
        ("Veggie Burger", "169", True),
        ("Paneer Burger", "189", True),
        ("Chicken Burger", "199", False),
    ]),
]

DEFAULT_TABLES = [str(number) for number in range(1, 11)]


def seed_menu(db: Optional[Session] = None) -> int:
    """
    Insert the default menu and tables into an empty database.

    Args:
        db: Session to use; a new one is opened (and closed) when omitted

    Returns:
        Number of menu items created (0 when the menu was already seeded)
    """
    owns_session = db is None
    if db is None:
        db = SessionLocal()
    try:
        existing = db.query(MenuItem).count()
        if existing > 0:
            logger.info("Menu already has %d items. Not seeding again.", existing)
            return 0

        code = 1
        for position, (category_name, items) in enumerate(DEFAULT_MENU):
            category = MenuCategory(name=category_name, position=position)
            for item_position, (name, price, is_veg) in enumerate(items):
                category.items.append(MenuItem(
                    name=name,
                    code=f"{code:02d}",
                    price=Decimal(price),
                    position=item_position,
                    is_vegetarian=is_veg,
                ))
                code += 1
            db.add(category)

        for table_id in DEFAULT_TABLES:
            if db.get(DiningTable, table_id) is None:
                db.add(DiningTable(id=table_id, status=TABLE_AVAILABLE))

        db.commit()
        created = code - 1
        logger.info("Seeded %d menu items in %d categories", created, len(DEFAULT_MENU))
        return created
    finally:
        if owns_session:
            db.close()


def main() -> None:
    from .logging_config import setup_logging

    setup_logging()
    seed_menu()


if __name__ == "__main__":
    main()
