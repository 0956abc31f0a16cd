"""Pydantic schemas for the global dashboard report."""

from datetime import date

from pydantic import Field

from app.features.analytics.schemas import CategoryShare, CityLocation
from app.shared.schemas import CamelModel


class DashboardSummary(CamelModel):
    """Headline totals over every line item in the window.

    ``total_products`` is the summed quantity of units, not distinct products;
    ``total_cities`` counts distinct destinations.
    """

    total_orders: int = Field(..., ge=0)
    total_products: int = Field(..., ge=0, description="Units shipped (sum of quantity)")
    total_value: int = Field(..., description="Sum of quantity * unit price, minor units")
    total_warehouses: int = Field(..., ge=0)
    total_cities: int = Field(..., ge=0, description="Distinct destinations")


class TopProduct(CamelModel):
    """A best-selling product by quantity."""

    id: str
    name: str | None = None
    category: str | None = None
    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    total_value: int


class TopCity(CityLocation):
    """A destination ranked by orders."""

    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    total_value: int


class MonthlyTrend(CamelModel):
    """Orders, units and value of one calendar month."""

    month: date | None = Field(None, description="First day of the month")
    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    total_value: int


class DashboardData(CamelModel):
    """Global dashboard payload.

    ``general_metrics`` is null when the window holds no orders; the lists are
    then empty.
    """

    general_metrics: DashboardSummary | None
    top_products: list[TopProduct]
    top_cities: list[TopCity]
    category_distribution: list[CategoryShare]
    temporal_trends: list[MonthlyTrend] = Field(..., description="Newest month first")
