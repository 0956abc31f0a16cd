"""Tests for VTEX payload parsing and the sync request body."""

import datetime

import pytest
from pydantic import ValidationError

from app.features.sync.schemas import SyncRequest, VtexOrder, VtexOrderList

ORDER_PAYLOAD = {
    "orderId": "1001-01",
    "invoicedDate": "2024-03-05T14:30:00.000000+00:00",
    "value": 5990,
    "status": "invoiced",
    "storePreferencesData": {"currencyCode": "BRL", "timeZone": "E. South America"},
    "items": [
        {
            "productId": 42,
            "name": "Blue Mug",
            "quantity": 2,
            "price": 2995,
            "additionalInfo": {
                "brandName": "Acme",
                "categories": [{"id": 7, "name": "Kitchen"}, {"id": 8, "name": "Home"}],
            },
        }
    ],
    "shippingData": {
        "address": {"street": "Rua A", "city": "Curitiba", "state": "PR", "country": "BRA"},
        "logisticsInfo": [
            {
                "deliveryIds": [{"warehouseId": "wh-1", "courierName": "Own"}],
                "pickupStoreInfo": {
                    "friendlyName": "Main DC",
                    "address": {"street": "Av B", "city": "Sao Paulo", "state": "SP"},
                },
            }
        ],
    },
}


class TestVtexOrder:
    """Tests for order detail parsing."""

    def test_parses_nested_fields(self):
        """Should expose the fields the fact store consumes."""
        order = VtexOrder.model_validate(ORDER_PAYLOAD)

        assert order.order_id == "1001-01"
        assert order.value == 5990
        assert order.currency_code == "BRL"
        assert order.warehouse_id == "wh-1"
        assert order.destination is not None
        assert order.destination.city == "Curitiba"
        assert order.logistics is not None
        assert order.logistics.pickup_store_info is not None
        assert order.logistics.pickup_store_info.friendly_name == "Main DC"

    def test_numeric_ids_become_strings(self):
        """Should coerce numeric product and category ids to strings."""
        item = VtexOrder.model_validate(ORDER_PAYLOAD).items[0]

        assert item.product_id == "42"
        assert item.first_category is not None
        assert item.first_category.id == "7"
        assert item.first_category.name == "Kitchen"

    def test_invoiced_date_is_naive_utc(self):
        """Should convert offset timestamps to naive UTC."""
        payload = {**ORDER_PAYLOAD, "invoicedDate": "2024-03-05T23:30:00-03:00"}

        order = VtexOrder.model_validate(payload)

        assert order.invoiced_date == datetime.datetime(2024, 3, 6, 2, 30)
        assert order.invoiced_date.tzinfo is None

    def test_missing_optional_sections(self):
        """Should tolerate orders without shipping or preferences."""
        order = VtexOrder.model_validate({"orderId": "x", "items": [{"productId": "p"}]})

        assert order.currency_code is None
        assert order.logistics is None
        assert order.warehouse_id is None
        assert order.destination is None
        assert order.items[0].first_category is None

    def test_order_id_is_required(self):
        """Should reject an order without an id."""
        with pytest.raises(ValidationError):
            VtexOrder.model_validate({"value": 10})


class TestVtexOrderList:
    """Tests for listing page parsing."""

    def test_reads_list_key(self):
        """Should read order ids from the ``list`` key."""
        listing = VtexOrderList.model_validate(
            {"list": [{"orderId": "a"}, {"orderId": "b"}], "paging": {"total": 2}}
        )

        assert [o.order_id for o in listing.orders] == ["a", "b"]

    def test_missing_list_is_empty(self):
        """Should treat a page without ``list`` as empty."""
        assert VtexOrderList.model_validate({}).orders == []


class TestSyncRequest:
    """Tests for the sync request body."""

    def test_accepts_camel_case(self):
        """Should read camelCase bounds."""
        request = SyncRequest.model_validate({"startDate": "2024-01-01", "endDate": "2024-01-31"})

        assert request.start_date == datetime.date(2024, 1, 1)
        assert request.end_date == datetime.date(2024, 1, 31)

    def test_bounds_are_optional(self):
        """Should allow an empty body."""
        request = SyncRequest.model_validate({})

        assert request.start_date is None
        assert request.end_date is None

    def test_rejects_inverted_range(self):
        """Should reject a start after the end."""
        with pytest.raises(ValidationError, match="startDate must be on or before endDate"):
            SyncRequest.model_validate({"startDate": "2024-02-01", "endDate": "2024-01-01"})

    def test_rejects_unknown_fields(self):
        """Should reject unexpected keys."""
        with pytest.raises(ValidationError):
            SyncRequest.model_validate({"startDate": "2024-01-01", "since": "yesterday"})
