"""API route triggering an order sync."""

from fastapi import APIRouter, Body, Depends

from app.core.config import get_settings
from app.core.database import Database, get_database
from app.core.exceptions import BadRequestError, FulfillmentStatsError
from app.features.sync.schemas import SyncRequest, SyncResponse
from app.features.sync.service import SyncService, default_window

router = APIRouter(tags=["sync"])


def get_sync_service(database: Database = Depends(get_database)) -> SyncService:
    """Dependency building a sync service on the application's store."""
    return SyncService(database)


@router.post(
    "/sync-vtex",
    response_model=SyncResponse,
    summary="Ingest invoiced orders from VTEX",
    description="""
Pull every order invoiced in the window from the VTEX OMS and store it.

Writes are insert-once: orders, products, warehouses, destinations and line
items already stored are left as first seen.

**Body** (optional): `{"startDate": "2024-01-01", "endDate": "2024-01-31"}`.
Missing bounds default to the configured look-back window ending today.

**Errors**: 502 if a listing page cannot be fetched; orders whose detail
cannot be fetched are skipped and counted in `failedOrders`.
""",
)
async def sync_vtex(
    request: SyncRequest | None = Body(None),
    service: SyncService = Depends(get_sync_service),
) -> SyncResponse:
    """Run a sync for the requested window.

    Args:
        request: Optional invoice-date window.
        service: Sync service.

    Returns:
        Run counters.
    """
    settings = get_settings()
    if not settings.vtex_api_url:
        raise FulfillmentStatsError(
            message="VTEX API is not configured",
            code="SYNC_NOT_CONFIGURED",
            status_code=503,
        )

    start, end = default_window(settings)
    if request is not None:
        start = request.start_date or start
        end = request.end_date or end
    if start > end:
        raise BadRequestError(
            message="startDate must be on or before endDate",
            details={"startDate": str(start), "endDate": str(end)},
        )

    result = await service.run(start, end)
    return SyncResponse(
        message="Sync completed",
        total_orders=result.total_orders,
        failed_orders=result.failed_orders,
        duration_ms=result.duration_ms,
    )
