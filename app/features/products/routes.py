"""API routes for per-product distribution reports."""

from fastapi import APIRouter, Depends

from app.features.analytics.dependencies import (
    get_date_range,
    get_page_request,
    require_identifier,
)
from app.features.analytics.executor import QueryExecutor, get_executor
from app.features.analytics.filters import DateRange
from app.features.analytics.pagination import PageRequest
from app.features.products.schemas import ProductDestination, ProductDistribution
from app.features.products.service import ProductReportService
from app.shared.schemas import DataResponse, PaginatedResponse

router = APIRouter(prefix="/products", tags=["products"])


@router.get(
    "/{product_id}/distribution-stats",
    response_model=DataResponse[ProductDistribution],
    summary="Product distribution statistics",
    description="""
How one product moved through the network in the window.

**Sections**:
- `generalStats`: name, brand, category, orders, units, value, average unit price,
  distinct cities and warehouses (null when the product has no orders)
- `warehouseStats`: every warehouse that shipped it, with its share of the product's orders
- `temporalStats`: orders and units per month with their share, newest first

**Example**: `GET /products/SKU-123/distribution-stats?startDate=2024-01-01&endDate=2024-06-30`
""",
)
async def get_distribution_stats(
    product_id: str,
    date_range: DateRange = Depends(get_date_range),
    executor: QueryExecutor = Depends(get_executor),
) -> DataResponse[ProductDistribution]:
    """Compute distribution statistics for one product.

    Args:
        product_id: Product identifier.
        date_range: Optional invoice-date window.
        executor: Request-scoped query executor.

    Returns:
        Distribution payload in the data envelope.
    """
    product_id = require_identifier(product_id, "productId")
    service = ProductReportService(executor)
    data = await service.get_distribution(product_id, date_range)
    return DataResponse[ProductDistribution](data=data)


@router.get(
    "/{product_id}/destinations",
    response_model=PaginatedResponse[ProductDestination],
    summary="Destinations of a product",
    description="""
Destinations (city, state, country) a product shipped to, most orders first,
with units and share of the product's orders.

**Pagination**: `page` (default 1) and `limit` (default 10, max 100).

**Example**: `GET /products/SKU-123/destinations?page=2&limit=20`
""",
)
async def get_destinations(
    product_id: str,
    date_range: DateRange = Depends(get_date_range),
    page: PageRequest = Depends(get_page_request),
    executor: QueryExecutor = Depends(get_executor),
) -> PaginatedResponse[ProductDestination]:
    """List a product's destinations.

    Args:
        product_id: Product identifier.
        date_range: Optional invoice-date window.
        page: Requested page.
        executor: Request-scoped query executor.

    Returns:
        One page of destinations with pagination metadata.
    """
    product_id = require_identifier(product_id, "productId")
    service = ProductReportService(executor)
    rows, meta = await service.get_destinations(product_id, date_range, page)
    return PaginatedResponse[ProductDestination](data=rows, pagination=meta)
