"""Tests for the product report routes."""

from decimal import Decimal
from types import SimpleNamespace
from typing import Any

from httpx import AsyncClient


class TestDistributionStats:
    """Tests for GET /products/{productId}/distribution-stats."""

    async def test_returns_summary(self, api_client: AsyncClient, stub_executor: Any) -> None:
        """Should serialize the summary with camelCase keys."""
        stub_executor.results = {
            "products.summary": [
                SimpleNamespace(
                    name="Desk Lamp",
                    brand_name="Lumen",
                    category_name="Home",
                    total_orders=1,
                    total_quantity=Decimal(3),
                    total_value=Decimal(3000),
                    avg_price=Decimal(1000),
                    total_cities=1,
                    total_warehouses=1,
                )
            ],
            "products.population": [(1,)],
        }

        response = await api_client.get("/products/SKU-1/distribution-stats")

        assert response.status_code == 200
        stats = response.json()["data"]["generalStats"]
        assert stats["brandName"] == "Lumen"
        assert stats["totalValue"] == 3000
        assert stats["avgPrice"] == 1000.0

    async def test_blank_product_id_is_rejected(self, api_client: AsyncClient) -> None:
        """Should answer 400 for a whitespace-only id."""
        response = await api_client.get("/products/%20/distribution-stats")

        assert response.status_code == 400
        assert response.json()["error"] == "productId is required"


class TestProductDestinations:
    """Tests for GET /products/{productId}/destinations."""

    async def test_returns_pagination(self, api_client: AsyncClient, stub_executor: Any) -> None:
        """Should include pagination metadata next to the rows."""
        stub_executor.results = {
            "products.destinations.count": [(1,)],
            "products.destinations.window": [
                SimpleNamespace(
                    city="Medellín",
                    state="ANT",
                    country="COL",
                    total_orders=2,
                    total_quantity=Decimal(4),
                )
            ],
            "products.population": [(2,)],
        }

        response = await api_client.get("/products/SKU-1/destinations", params={"limit": 5})

        assert response.status_code == 200
        body = response.json()
        assert body["data"][0]["city"] == "Medellín"
        assert body["data"][0]["percentage"] == 100.0
        assert body["pagination"] == {
            "totalItems": 1,
            "totalPages": 1,
            "currentPage": 1,
            "itemsPerPage": 5,
        }

    async def test_default_page_size(self, api_client: AsyncClient) -> None:
        """Should default to ten items per page."""
        response = await api_client.get("/products/SKU-1/destinations")

        assert response.status_code == 200
        assert response.json()["pagination"]["itemsPerPage"] == 10

    async def test_limit_above_maximum_is_rejected(self, api_client: AsyncClient) -> None:
        """Should answer 400 when limit exceeds the configured maximum."""
        response = await api_client.get("/products/SKU-1/destinations", params={"limit": 500})

        assert response.status_code == 400

    async def test_page_zero_is_rejected(self, api_client: AsyncClient) -> None:
        """Should answer 400 for page < 1."""
        response = await api_client.get("/products/SKU-1/destinations", params={"page": 0})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_huge_page_is_rejected(
        self, api_client: AsyncClient, stub_executor: Any
    ) -> None:
        """Should answer 400 before querying when the page offset overflows."""
        response = await api_client.get(
            "/products/SKU-1/destinations", params={"page": 300_000_000}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"
        assert stub_executor.statements == {}
