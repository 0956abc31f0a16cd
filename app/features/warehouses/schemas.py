"""Pydantic schemas for warehouse reports."""

import datetime

from pydantic import Field

from app.features.analytics.schemas import CityLocation
from app.shared.schemas import CamelModel


class WarehouseSummary(CamelModel):
    """Totals of one warehouse over the window.

    Attributes:
        total_products: Number of line items shipped (not distinct products).
        avg_products_per_order: Line items per distinct order.
    """

    total_orders: int = Field(..., ge=0)
    total_products: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    total_value: int
    avg_products_per_order: float = Field(..., ge=0)


class CategoryItemShare(CamelModel):
    """A category's share of the warehouse's line items."""

    category: str | None = None
    product_count: int = Field(..., ge=0, description="Line items in the category")
    total_quantity: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)


class CityOrderShare(CityLocation):
    """A destination's share of the warehouse's orders."""

    order_count: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)


class WarehouseStats(CamelModel):
    """Warehouse payload; ``general_stats`` is null when nothing shipped."""

    general_stats: WarehouseSummary | None
    category_stats: list[CategoryItemShare]
    top_cities: list[CityOrderShare]


class WarehouseLineItem(CamelModel):
    """One line item shipped from the warehouse (unaggregated)."""

    product_id: str
    name: str | None = None
    brand_name: str | None = None
    category_name: str | None = None
    quantity: int | None = None
    unit_price: int | None = Field(None, description="Minor units")
    invoiced_date: datetime.datetime | None = None
    destination_city: str | None = None
    destination_state: str | None = None
    destination_country: str | None = None
