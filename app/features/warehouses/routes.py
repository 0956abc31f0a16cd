"""API routes for warehouse reports."""

from fastapi import APIRouter, Depends

from app.features.analytics.dependencies import (
    get_date_range,
    get_page_request,
    require_identifier,
)
from app.features.analytics.executor import QueryExecutor, get_executor
from app.features.analytics.filters import DateRange
from app.features.analytics.pagination import PageRequest
from app.features.warehouses.schemas import WarehouseLineItem, WarehouseStats
from app.features.warehouses.service import WarehouseReportService
from app.shared.schemas import DataResponse, PaginatedResponse

router = APIRouter(prefix="/warehouses", tags=["warehouses"])


@router.get(
    "/{warehouse_id}/stats",
    response_model=DataResponse[WarehouseStats],
    summary="Warehouse statistics",
    description="""
What one warehouse shipped in the window.

**Sections**:
- `generalStats`: orders, line items (`totalProducts`), units, value and line items
  per order (null when nothing shipped)
- `categoryStats`: every category by line items, with its share of the line items
- `topCities`: top 5 destinations by orders, with their share of the orders
""",
)
async def get_warehouse_stats(
    warehouse_id: str,
    date_range: DateRange = Depends(get_date_range),
    executor: QueryExecutor = Depends(get_executor),
) -> DataResponse[WarehouseStats]:
    """Compute statistics for one warehouse.

    Args:
        warehouse_id: Warehouse identifier.
        date_range: Optional invoice-date window.
        executor: Request-scoped query executor.

    Returns:
        Warehouse payload in the data envelope.
    """
    warehouse_id = require_identifier(warehouse_id, "warehouseId")
    service = WarehouseReportService(executor)
    data = await service.get_stats(warehouse_id, date_range)
    return DataResponse[WarehouseStats](data=data)


@router.get(
    "/{warehouse_id}/products",
    response_model=PaginatedResponse[WarehouseLineItem],
    summary="Line items shipped by a warehouse",
    description="""
Every line item shipped from the warehouse, newest invoice first, with product,
quantity, unit price and destination (null when the item has none).

**Pagination**: `page` (default 1) and `limit` (default 10, max 100).
""",
)
async def get_warehouse_products(
    warehouse_id: str,
    date_range: DateRange = Depends(get_date_range),
    page: PageRequest = Depends(get_page_request),
    executor: QueryExecutor = Depends(get_executor),
) -> PaginatedResponse[WarehouseLineItem]:
    """List line items shipped by a warehouse.

    Args:
        warehouse_id: Warehouse identifier.
        date_range: Optional invoice-date window.
        page: Requested page.
        executor: Request-scoped query executor.

    Returns:
        One page of line items with pagination metadata.
    """
    warehouse_id = require_identifier(warehouse_id, "warehouseId")
    service = WarehouseReportService(executor)
    rows, meta = await service.get_line_items(warehouse_id, date_range, page)
    return PaginatedResponse[WarehouseLineItem](data=rows, pagination=meta)
