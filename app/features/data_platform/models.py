"""Fact store ORM models for order-fulfillment analytics.

Star schema around one fact table:
- Dimensions: Order, Product, Warehouse, Destination
- Fact: OrderItem (one row per order line)

Grain: OrderItem uniquely keyed by (order_id, product_id).

Every table is written insert-once by the sync job (``ON CONFLICT DO NOTHING``
on its natural key); nothing here is updated after the first ingestion.
Monetary columns hold integer minor units (cents).
"""

import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.shared.models import IngestedAtMixin

# ============================================================================
# DIMENSION TABLES
# ============================================================================


class Order(IngestedAtMixin, Base):
    """Invoiced order header.

    Attributes:
        order_id: Platform order id (natural key).
        invoiced_date: Invoice timestamp, naive UTC.
        total_value: Order total in minor units.
        currency_code: ISO currency code.
        status: Platform status at first ingestion (invoiced, pending, cancelled, ...).
    """

    __tablename__ = "orders"

    order_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    invoiced_date: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=False), index=True, nullable=True
    )
    total_value: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    currency_code: Mapped[str | None] = mapped_column(String(3), nullable=True)
    status: Mapped[str | None] = mapped_column(String(40), nullable=True)

    items: Mapped[list["OrderItem"]] = relationship(back_populates="order")


class Product(IngestedAtMixin, Base):
    """Product dimension table.

    Attributes:
        product_id: Platform product id (natural key).
        name: Product display name.
        brand_name: Brand.
        category_id: Id of the product's first category.
        category_name: Name of the product's first category.
    """

    __tablename__ = "products"

    product_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    brand_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    category_name: Mapped[str | None] = mapped_column(String(120), index=True, nullable=True)

    items: Mapped[list["OrderItem"]] = relationship(back_populates="product")


class Warehouse(IngestedAtMixin, Base):
    """Warehouse (shipping origin) dimension table."""

    __tablename__ = "warehouses"

    warehouse_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    warehouse_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    address_state: Mapped[str | None] = mapped_column(String(120), nullable=True)
    address_country: Mapped[str | None] = mapped_column(String(3), nullable=True)

    items: Mapped[list["OrderItem"]] = relationship(back_populates="warehouse")


class Destination(IngestedAtMixin, Base):
    """Shipping destination dimension table.

    Synthetic id; natural key is (city, state, country). Cities are stored as
    received from the platform and matched through the city-name normalizer.
    """

    __tablename__ = "destinations"

    destination_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state: Mapped[str | None] = mapped_column(String(120), nullable=True)
    country: Mapped[str | None] = mapped_column(String(3), nullable=True)

    items: Mapped[list["OrderItem"]] = relationship(back_populates="destination")

    __table_args__ = (
        UniqueConstraint("city", "state", "country", name="uq_destinations_natural_key"),
    )


# ============================================================================
# FACT TABLE
# ============================================================================


class OrderItem(IngestedAtMixin, Base):
    """Order line fact table; every aggregate scans this table.

    CRITICAL: Grain is (order_id, product_id). Warehouse and destination are
    NULL when the platform omitted shipping details.

    Attributes:
        order_id: Order (FK).
        product_id: Product (FK).
        warehouse_id: Shipping warehouse (FK, nullable).
        destination_id: Shipping destination (FK, nullable).
        quantity: Units on the line.
        unit_price: Price per unit in minor units.
    """

    __tablename__ = "order_items"

    order_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("orders.order_id"), primary_key=True
    )
    product_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("products.product_id"), primary_key=True, index=True
    )
    warehouse_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("warehouses.warehouse_id"), index=True, nullable=True
    )
    destination_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("destinations.destination_id"), index=True, nullable=True
    )
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    unit_price: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    order: Mapped["Order"] = relationship(back_populates="items")
    product: Mapped["Product"] = relationship(back_populates="items")
    warehouse: Mapped["Warehouse | None"] = relationship(back_populates="items")
    destination: Mapped["Destination | None"] = relationship(back_populates="items")

    __table_args__ = (
        Index("ix_order_items_warehouse_product", "warehouse_id", "product_id"),
        CheckConstraint("quantity IS NULL OR quantity >= 0", name="ck_order_items_quantity"),
        CheckConstraint("unit_price IS NULL OR unit_price >= 0", name="ck_order_items_price"),
    )
