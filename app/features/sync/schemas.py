"""Schemas for order ingestion.

Two groups:
- VTEX OMS payloads (only the fields the fact store consumes; the rest is
  ignored). Money fields are integer cents as VTEX sends them.
- The ``POST /sync-vtex`` request and response.
"""

import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.shared.schemas import CamelModel

# =============================================================================
# VTEX OMS payloads
# =============================================================================


class VtexModel(BaseModel):
    """Base for VTEX payloads: camelCase keys, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class VtexCategory(VtexModel):
    id: str | None = None
    name: str | None = None


class VtexAdditionalInfo(VtexModel):
    brand_name: str | None = None
    categories: list[VtexCategory] = Field(default_factory=list)


class VtexItem(VtexModel):
    """One order line."""

    product_id: str
    name: str | None = None
    quantity: int | None = None
    price: int | None = Field(None, description="Unit price in cents")
    additional_info: VtexAdditionalInfo | None = None

    @property
    def first_category(self) -> VtexCategory | None:
        """The product's first category, which is the one stored."""
        if self.additional_info is None or not self.additional_info.categories:
            return None
        return self.additional_info.categories[0]


class VtexAddress(VtexModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


class VtexDeliveryId(VtexModel):
    warehouse_id: str | None = None


class VtexPickupStoreInfo(VtexModel):
    friendly_name: str | None = None
    address: VtexAddress | None = None


class VtexLogisticsInfo(VtexModel):
    delivery_ids: list[VtexDeliveryId] = Field(default_factory=list)
    pickup_store_info: VtexPickupStoreInfo | None = None


class VtexShippingData(VtexModel):
    address: VtexAddress | None = None
    logistics_info: list[VtexLogisticsInfo] = Field(default_factory=list)


class VtexStorePreferences(VtexModel):
    currency_code: str | None = None


class VtexOrder(VtexModel):
    """Order detail as returned by ``GET /api/oms/pvt/orders/{orderId}``."""

    order_id: str
    invoiced_date: datetime.datetime | None = None
    value: int | None = Field(None, description="Order total in cents")
    status: str | None = None
    store_preferences_data: VtexStorePreferences | None = None
    items: list[VtexItem] = Field(default_factory=list)
    shipping_data: VtexShippingData | None = None

    @field_validator("invoiced_date")
    @classmethod
    def to_naive_utc(cls, v: datetime.datetime | None) -> datetime.datetime | None:
        """Store invoice timestamps as naive UTC."""
        if v is None or v.tzinfo is None:
            return v
        return v.astimezone(datetime.UTC).replace(tzinfo=None)

    @property
    def currency_code(self) -> str | None:
        if self.store_preferences_data is None:
            return None
        return self.store_preferences_data.currency_code

    @property
    def logistics(self) -> VtexLogisticsInfo | None:
        """First logistics entry; it decides the shipping warehouse."""
        if self.shipping_data is None or not self.shipping_data.logistics_info:
            return None
        return self.shipping_data.logistics_info[0]

    @property
    def warehouse_id(self) -> str | None:
        logistics = self.logistics
        if logistics is None or not logistics.delivery_ids:
            return None
        return logistics.delivery_ids[0].warehouse_id

    @property
    def destination(self) -> VtexAddress | None:
        if self.shipping_data is None:
            return None
        return self.shipping_data.address


class VtexOrderSummary(VtexModel):
    order_id: str


class VtexOrderList(VtexModel):
    """One page of ``GET /api/oms/pvt/orders``."""

    orders: list[VtexOrderSummary] = Field(default_factory=list, alias="list")


# =============================================================================
# API request / response
# =============================================================================


class SyncRequest(CamelModel):
    """Invoice-date window to ingest (both bounds inclusive).

    Omitted bounds default to the configured look-back window ending today.
    """

    model_config = ConfigDict(extra="forbid")

    start_date: datetime.date | None = Field(None, description="First invoice day")
    end_date: datetime.date | None = Field(None, description="Last invoice day")

    @model_validator(mode="after")
    def validate_range(self) -> "SyncRequest":
        """Reject an inverted window."""
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must be on or before endDate")
        return self


class SyncResponse(CamelModel):
    """Outcome of one sync run."""

    message: str
    total_orders: int = Field(..., ge=0, description="Orders written (or already present)")
    failed_orders: int = Field(..., ge=0, description="Orders whose detail could not be fetched")
    duration_ms: float = Field(..., ge=0)
