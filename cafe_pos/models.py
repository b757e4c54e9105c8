from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    Boolean,
    JSON,
    DateTime,
    ForeignKey,
    Text,
    Index,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class MenuCategory(Base):
    __tablename__ = "menu_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    # available / low / unavailable; NULL means available
    status = Column(String, nullable=True)

    items = relationship(
        "MenuItem",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="MenuItem.position",
    )


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("menu_categories.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=True, index=True)  # quick-entry code, e.g. "07"
    price = Column(Numeric(10, 2), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=True)
    is_vegetarian = Column(Boolean, nullable=True)  # tri-state: unknown when NULL

    category = relationship("MenuCategory", back_populates="items")

    # Names are unique within a category
    __table_args__ = (
        UniqueConstraint("category_id", "name", name="uix_menu_item_category_name"),
    )


class DiningTable(Base):
    __tablename__ = "dining_tables"

    id = Column(String, primary_key=True)  # e.g. "4", "T12"
    status = Column(String, nullable=False, default="Available")  # Available / Occupied / Cleaning / Reserved


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    table_id = Column(String, ForeignKey("dining_tables.id"), nullable=True, index=True)
    order_type = Column(String, nullable=False, default="Dine-In")  # Dine-In / Take-Away / Home-Delivery
    status = Column(String, nullable=False, default="pending", index=True)  # pending / completed
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Bill snapshot, written once on settlement
    subtotal = Column(Numeric(10, 2), nullable=True)
    discount_percent = Column(Numeric(5, 2), nullable=True)
    discount_amount = Column(Numeric(10, 2), nullable=True)
    tax_amount = Column(Numeric(10, 2), nullable=True)
    total = Column(Numeric(10, 2), nullable=True)
    receipt_text = Column(Text, nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )

    __table_args__ = (
        Index("ix_orders_status_created_at", "status", "created_at"),
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    instruction = Column(Text, nullable=True)

    order = relationship("Order", back_populates="items")


class VenueSettings(Base):
    """Single-row venue configuration. Only the KOT preference lives here for now."""
    __tablename__ = "venue_settings"

    id = Column(Integer, primary_key=True)
    venue_name = Column(String, nullable=True)
    kot_type = Column(String, nullable=False, default="single")
    kot_categories = Column(JSON, nullable=False, default=list)
