"""Pydantic schemas for product distribution reports."""

from pydantic import Field

from app.features.analytics.schemas import CityLocation, MonthlyShare
from app.shared.schemas import CamelModel


class ProductSummary(CamelModel):
    """Totals of one product over the window.

    Attributes:
        avg_price: Mean unit price over line items with a price, minor units.
        total_cities: Distinct destination city names (items without a
            destination are counted in the other totals but not here).
    """

    name: str | None = None
    brand_name: str | None = None
    category_name: str | None = None
    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    total_value: int
    avg_price: float | None = None
    total_cities: int = Field(..., ge=0)
    total_warehouses: int = Field(..., ge=0)


class WarehouseShare(CamelModel):
    """A warehouse's share of a product's orders."""

    warehouse_id: str
    warehouse_name: str | None = None
    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)


class ProductDistribution(CamelModel):
    """Distribution payload; ``general_stats`` is null when the product has no orders."""

    general_stats: ProductSummary | None
    warehouse_stats: list[WarehouseShare]
    temporal_stats: list[MonthlyShare] = Field(..., description="Newest month first")


class ProductDestination(CityLocation):
    """A destination's share of a product's orders."""

    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)
