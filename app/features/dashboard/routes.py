"""API routes for the global dashboard."""

from fastapi import APIRouter, Depends

from app.features.analytics.dependencies import get_date_range
from app.features.analytics.executor import QueryExecutor, get_executor
from app.features.analytics.filters import DateRange
from app.features.dashboard.schemas import DashboardData
from app.features.dashboard.service import DashboardService
from app.shared.schemas import DataResponse

router = APIRouter(tags=["dashboard"])


@router.get(
    "/dashboard",
    response_model=DataResponse[DashboardData],
    summary="Global fulfillment dashboard",
    description="""
Headline metrics over every order invoiced in the window.

**Sections**:
- `generalMetrics`: orders, units, value, warehouses and destinations (null when empty)
- `topProducts`: top 5 products by units shipped
- `topCities`: top 5 destinations by orders
- `categoryDistribution`: every category with its share of orders
- `temporalTrends`: orders, units and value per month, newest first

Values are integer minor units (cents).

**Example**: `GET /dashboard?startDate=2024-01-01&endDate=2024-03-31`
""",
)
async def get_dashboard(
    date_range: DateRange = Depends(get_date_range),
    executor: QueryExecutor = Depends(get_executor),
) -> DataResponse[DashboardData]:
    """Compute the global dashboard.

    Args:
        date_range: Optional invoice-date window.
        executor: Request-scoped query executor.

    Returns:
        Dashboard payload in the data envelope.
    """
    service = DashboardService(executor)
    data = await service.get_dashboard(date_range)
    return DataResponse[DashboardData](data=data)
