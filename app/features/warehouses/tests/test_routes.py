"""Tests for the warehouse routes."""

from datetime import datetime
from types import SimpleNamespace
from typing import Any

from httpx import AsyncClient


class TestWarehouseStats:
    """Tests for GET /warehouses/{warehouseId}/stats."""

    async def test_unknown_warehouse_is_empty(self, api_client: AsyncClient) -> None:
        """Should answer 200 with empty sections."""
        response = await api_client.get("/warehouses/WH-404/stats")

        assert response.status_code == 200
        assert response.json() == {
            "data": {"generalStats": None, "categoryStats": [], "topCities": []}
        }

    async def test_blank_warehouse_is_rejected(self, api_client: AsyncClient) -> None:
        """Should answer 400 for a whitespace-only identifier."""
        response = await api_client.get("/warehouses/%20/stats")

        assert response.status_code == 400
        assert response.json()["error"] == "warehouseId is required"

    async def test_date_window_is_bound(
        self, api_client: AsyncClient, stub_executor: Any
    ) -> None:
        """Should bind the window before the warehouse id."""
        await api_client.get(
            "/warehouses/WH-1/stats", params={"startDate": "2024-01-01", "endDate": "2024-01-31"}
        )

        params = stub_executor.statements["warehouses.summary"].compile().params
        assert params["start_date_1"] == datetime(2024, 1, 1)
        assert params["warehouse_id_3"] == "WH-1"


class TestWarehouseProducts:
    """Tests for GET /warehouses/{warehouseId}/products."""

    async def test_line_item_page(self, api_client: AsyncClient, stub_executor: Any) -> None:
        """Should return raw line items in camelCase with pagination."""
        stub_executor.results = {
            "warehouses.products.count": [(11,)],
            "warehouses.products.window": [
                SimpleNamespace(
                    product_id="SKU-1",
                    name="Desk Lamp",
                    brand_name="Lumen",
                    category_name="Home",
                    quantity=2,
                    unit_price=1500,
                    invoiced_date=datetime(2024, 1, 5, 12, 0),
                    destination_city=None,
                    destination_state=None,
                    destination_country=None,
                )
            ],
        }

        response = await api_client.get("/warehouses/WH-1/products", params={"limit": 5})

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {
            "totalItems": 11,
            "totalPages": 3,
            "currentPage": 1,
            "itemsPerPage": 5,
        }
        item = body["data"][0]
        assert item["productId"] == "SKU-1"
        assert item["unitPrice"] == 1500
        assert item["destinationCity"] is None

    async def test_limit_ceiling(self, api_client: AsyncClient) -> None:
        """Should reject a limit above the maximum."""
        response = await api_client.get("/warehouses/WH-1/products", params={"limit": 500})

        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"

    async def test_zero_page_is_validation_error(self, api_client: AsyncClient) -> None:
        """Should reject page 0 through query validation."""
        response = await api_client.get("/warehouses/WH-1/products", params={"page": 0})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
