"""
Menu lookups and stock status updates.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models import MenuCategory, MenuItem
from .stock import AvailabilityState

logger = logging.getLogger(__name__)

VEG_FILTERS = ("all", "veg", "non-veg")


class AmbiguousMenuItemError(Exception):
    """Raised when an item name exists in more than one category and none was given."""

    def __init__(self, name: str, categories: List[str]):
        self.name = name
        self.categories = categories
        super().__init__(
            f"'{name}' is on the menu under {', '.join(categories)}; specify a category"
        )


def list_categories(db: Session) -> List[MenuCategory]:
    return db.query(MenuCategory).order_by(MenuCategory.position, MenuCategory.id).all()


def find_menu_item(db: Session, name: str, category: Optional[str] = None) -> Optional[MenuItem]:
    """
    Look an item up by name, optionally within one category.

    Names are only unique per category, so a bare name that matches several
    rows is refused rather than resolved to whichever comes first.

    Raises:
        AmbiguousMenuItemError: if no category is given and the name is shared
    """
    query = db.query(MenuItem).filter(MenuItem.name == name)
    if category:
        query = query.join(MenuItem.category).filter(MenuCategory.name == category)
    matches = query.order_by(MenuItem.id).all()
    if len(matches) > 1:
        raise AmbiguousMenuItemError(name, [item.category.name for item in matches])
    return matches[0] if matches else None


def find_menu_item_by_code(db: Session, code: str) -> Optional[MenuItem]:
    """Quick-entry lookup by the item's two-digit code."""
    return db.query(MenuItem).filter(MenuItem.code == code.strip().upper()).first()


def find_category(db: Session, name: str) -> Optional[MenuCategory]:
    return db.query(MenuCategory).filter(MenuCategory.name == name).first()


def matches_veg_filter(item: MenuItem, veg_filter: str) -> bool:
    """Items with an unknown vegetarian flag only show under "all"."""
    if veg_filter == "veg":
        return item.is_vegetarian is True
    if veg_filter == "non-veg":
        return item.is_vegetarian is False
    return True


def filtered_menu(db: Session, veg_filter: str = "all") -> List[Tuple[MenuCategory, List[MenuItem]]]:
    return [
        (category, [item for item in category.items if matches_veg_filter(item, veg_filter)])
        for category in list_categories(db)
    ]


def set_item_status(db: Session, item: MenuItem, status: Optional[AvailabilityState]) -> MenuItem:
    item.status = status.value if status is not None else None
    db.commit()
    db.refresh(item)
    logger.info("Item '%s' status set to %s", item.name, item.status or "available")
    return item


def set_category_status(db: Session, category: MenuCategory, status: Optional[AvailabilityState]) -> MenuCategory:
    category.status = status.value if status is not None else None
    db.commit()
    db.refresh(category)
    logger.info("Category '%s' status set to %s", category.name, category.status or "available")
    return category
