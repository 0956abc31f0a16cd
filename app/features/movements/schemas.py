"""Pydantic schemas for the movements report."""

import datetime

from pydantic import Field

from app.features.analytics.schemas import CityLocation
from app.shared.schemas import CamelModel


class MovementProduct(CamelModel):
    id: str
    name: str | None = None
    category: str | None = None


class MovementWarehouse(CamelModel):
    id: str
    name: str | None = None


class MovementDetail(CamelModel):
    """Summed units and value for one movement group."""

    quantity: int = Field(..., ge=0)
    value: int = Field(..., description="Minor units")
    date: datetime.datetime | None = Field(None, description="Invoice timestamp")
    status: str | None = None


class Movement(CamelModel):
    """Goods of one product moving from a warehouse to a destination.

    One row per (product, warehouse, destination, invoice timestamp, status).
    """

    product: MovementProduct
    warehouse: MovementWarehouse
    destination: CityLocation
    movement: MovementDetail
