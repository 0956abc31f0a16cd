"""Fact store for order-fulfillment analytics.

- Dimension tables: Order, Product, Warehouse, Destination
- Fact table: OrderItem
"""

from app.features.data_platform.models import (
    Destination,
    Order,
    OrderItem,
    Product,
    Warehouse,
)

__all__ = [
    "Destination",
    "Order",
    "OrderItem",
    "Product",
    "Warehouse",
]
