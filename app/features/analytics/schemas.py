"""Report row schemas shared by more than one report family.

Money fields are integer minor units (cents) exactly as stored.
"""

from datetime import date

from pydantic import Field

from app.shared.schemas import CamelModel


class MonthlyShare(CamelModel):
    """One month of a filtered population with its share of orders."""

    month: date | None = Field(None, description="First day of the month")
    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100, description="Share of the population's orders")


class CategoryShare(CamelModel):
    """One product category with its share of orders."""

    category: str | None = Field(None, description="Category name (null when uncategorised)")
    total_orders: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)


class CityLocation(CamelModel):
    """A destination's natural key."""

    city: str | None = None
    state: str | None = None
    country: str | None = None
