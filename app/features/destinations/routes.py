"""API routes for destination-city reports."""

from fastapi import APIRouter, Depends

from app.features.analytics.dependencies import (
    get_date_range,
    get_page_request,
    require_identifier,
)
from app.features.analytics.executor import QueryExecutor, get_executor
from app.features.analytics.filters import DateRange
from app.features.analytics.pagination import PageRequest
from app.features.destinations.schemas import CityStats, CityWarehouse
from app.features.destinations.service import CityReportService
from app.shared.schemas import DataResponse, PaginatedResponse

router = APIRouter(prefix="/destinations", tags=["destinations"])


@router.get(
    "/{city_id}/stats",
    response_model=DataResponse[CityStats],
    summary="Destination city statistics",
    description="""
Fulfillment statistics for every destination in one city.

The city identifier is matched loosely: text after the first comma is ignored,
accents and non-letters are dropped and case is folded, so `Bogotá, D.C.`,
`bogota` and `BOGOTA` all address the same city. An identifier with no letters
matches nothing.

**Sections**:
- `generalStats`: orders, units, value, distinct warehouses and products
  (null when nothing matches)
- `categoryStats`: top 5 categories by orders with their share
- `temporalStats`: orders and units per month with their share, newest first
""",
)
async def get_city_stats(
    city_id: str,
    date_range: DateRange = Depends(get_date_range),
    executor: QueryExecutor = Depends(get_executor),
) -> DataResponse[CityStats]:
    """Compute statistics for one destination city.

    Args:
        city_id: Free-form city identifier.
        date_range: Optional invoice-date window.
        executor: Request-scoped query executor.

    Returns:
        City payload in the data envelope.
    """
    city_id = require_identifier(city_id, "cityId")
    service = CityReportService(executor)
    data = await service.get_stats(city_id, date_range)
    return DataResponse[CityStats](data=data)


@router.get(
    "/{city_id}/warehouses",
    response_model=PaginatedResponse[CityWarehouse],
    summary="Warehouses serving a city",
    description="""
Warehouses that shipped to the city, most orders first, with address, units and
share of the city's orders.

**Pagination**: `page` (default 1) and `limit` (default 10, max 100).
""",
)
async def get_city_warehouses(
    city_id: str,
    date_range: DateRange = Depends(get_date_range),
    page: PageRequest = Depends(get_page_request),
    executor: QueryExecutor = Depends(get_executor),
) -> PaginatedResponse[CityWarehouse]:
    """List warehouses serving a city.

    Args:
        city_id: Free-form city identifier.
        date_range: Optional invoice-date window.
        page: Requested page.
        executor: Request-scoped query executor.

    Returns:
        One page of warehouses with pagination metadata.
    """
    city_id = require_identifier(city_id, "cityId")
    service = CityReportService(executor)
    rows, meta = await service.get_warehouses(city_id, date_range, page)
    return PaginatedResponse[CityWarehouse](data=rows, pagination=meta)
