"""Pydantic schemas for destination-city reports."""

from pydantic import Field

from app.features.analytics.schemas import CategoryShare, CityLocation, MonthlyShare
from app.shared.schemas import CamelModel


class CitySummary(CityLocation):
    """Totals over every destination whose city matches the requested key.

    ``city``/``state``/``country`` label the matching destination with the
    most orders.
    """

    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    total_value: int
    total_warehouses: int = Field(..., ge=0)
    total_products: int = Field(..., ge=0, description="Distinct products")


class CityStats(CamelModel):
    """City report payload; ``general_stats`` is null when nothing matched."""

    general_stats: CitySummary | None
    category_stats: list[CategoryShare] = Field(..., description="Top categories by orders")
    temporal_stats: list[MonthlyShare] = Field(..., description="Newest month first")


class WarehouseAddress(CamelModel):
    """Postal address of a warehouse."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


class CityWarehouse(CamelModel):
    """A warehouse serving the city, with its share of the city's orders."""

    warehouse_id: str
    warehouse_name: str | None = None
    address: WarehouseAddress
    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)
