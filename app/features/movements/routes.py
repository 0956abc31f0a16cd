"""API routes for the movements report."""

from fastapi import APIRouter, Depends, Query

from app.features.analytics.dependencies import get_page_request, get_required_date_range
from app.features.analytics.executor import QueryExecutor, get_executor
from app.features.analytics.filters import DateRange
from app.features.analytics.pagination import PageRequest
from app.features.movements.schemas import Movement
from app.features.movements.service import MovementService
from app.shared.schemas import PaginatedResponse

router = APIRouter(tags=["movements"])


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


@router.get(
    "/movements",
    response_model=PaginatedResponse[Movement],
    summary="Product movements",
    description="""
Units and value moved per product, warehouse, destination, invoice timestamp and
order status, newest first.

**Required**: `startDate` and `endDate` (inclusive, YYYY-MM-DD).

**Optional filters** (combinable):
- `productId`: one product
- `warehouseId`: one warehouse
- `cityId`: one destination city, matched by normalized name

**Pagination**: `page` (default 1) and `limit` (default 10, max 100).

**Example**: `GET /movements?startDate=2024-01-01&endDate=2024-01-31&warehouseId=WH-1&cityId=bogota`
""",
)
async def list_movements(
    date_range: DateRange = Depends(get_required_date_range),
    page: PageRequest = Depends(get_page_request),
    product_id: str | None = Query(None, alias="productId", description="Filter by product."),
    warehouse_id: str | None = Query(
        None, alias="warehouseId", description="Filter by warehouse."
    ),
    city_id: str | None = Query(
        None, alias="cityId", description="Filter by destination city (normalized match)."
    ),
    executor: QueryExecutor = Depends(get_executor),
) -> PaginatedResponse[Movement]:
    """List movements in a date window.

    Args:
        date_range: Required invoice-date window.
        page: Requested page.
        product_id: Product filter (optional).
        warehouse_id: Warehouse filter (optional).
        city_id: City filter (optional).
        executor: Request-scoped query executor.

    Returns:
        One page of movements with pagination metadata.
    """
    service = MovementService(executor)
    rows, meta = await service.list_movements(
        date_range,
        page,
        product_id=_optional(product_id),
        warehouse_id=_optional(warehouse_id),
        city_id=_optional(city_id),
    )
    return PaginatedResponse[Movement](data=rows, pagination=meta)
