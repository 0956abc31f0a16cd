"""Order ingestion: VTEX OMS -> fact store.

Every table is insert-once. Each order is written in its own transaction, so
a failure never leaves a partially written order behind.
"""

import asyncio
import datetime
import time
import uuid
from dataclasses import dataclass

import structlog

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.database import Database
from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.features.data_platform.models import (
    Destination,
    Order,
    OrderItem,
    Product,
    Warehouse,
)
from app.features.sync.client import VtexClient
from app.features.sync.schemas import VtexAddress, VtexOrder

logger = get_logger(__name__)


@dataclass
class SyncResult:
    """Counters of one sync run."""

    start_date: datetime.date
    end_date: datetime.date
    total_orders: int = 0
    failed_orders: int = 0
    duration_ms: float = 0.0


def default_window(
    settings: Settings, today: datetime.date | None = None
) -> tuple[datetime.date, datetime.date]:
    """Look-back window ending today (inclusive)."""
    end = today or datetime.datetime.now(datetime.UTC).date()
    start = end - datetime.timedelta(days=settings.vtex_sync_lookback_days - 1)
    return start, end


class OrderUpserter:
    """Writes one VTEX order into the fact store."""

    def __init__(self, database: Database) -> None:
        self.database = database

    async def upsert(self, order: VtexOrder) -> None:
        """Insert an order with its products, warehouse, destination and lines.

        Existing rows are left untouched (first write wins).

        Args:
            order: Parsed order detail.

        Raises:
            DatabaseError: If the transaction fails; it is rolled back.
        """
        try:
            async with self.database.session() as session, session.begin():
                await self._write(session, order)
        except SQLAlchemyError as e:
            logger.error(
                "sync.order_upsert_failed",
                order_id=order.order_id,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise DatabaseError(
                message="Failed to store synced order",
                details={"order_id": order.order_id, "error_type": type(e).__name__},
            ) from e

        logger.debug("sync.order_upserted", order_id=order.order_id, items=len(order.items))

    async def _write(self, session: AsyncSession, order: VtexOrder) -> None:
        await session.execute(
            pg_insert(Order)
            .values(
                order_id=order.order_id,
                invoiced_date=order.invoiced_date,
                total_value=order.value,
                currency_code=order.currency_code,
                status=order.status,
            )
            .on_conflict_do_nothing(index_elements=[Order.order_id])
        )

        warehouse_id = order.warehouse_id or None
        if warehouse_id is not None:
            await self._write_warehouse(session, order, warehouse_id)

        destination_id = None
        if order.destination is not None:
            destination_id = await self._destination_id(session, order.destination)

        for item in order.items:
            category = item.first_category
            await session.execute(
                pg_insert(Product)
                .values(
                    product_id=item.product_id,
                    name=item.name,
                    brand_name=item.additional_info.brand_name if item.additional_info else None,
                    category_id=category.id if category else None,
                    category_name=category.name if category else None,
                )
                .on_conflict_do_nothing(index_elements=[Product.product_id])
            )
            await session.execute(
                pg_insert(OrderItem)
                .values(
                    order_id=order.order_id,
                    product_id=item.product_id,
                    warehouse_id=warehouse_id,
                    destination_id=destination_id,
                    quantity=item.quantity,
                    unit_price=item.price,
                )
                .on_conflict_do_nothing(
                    index_elements=[OrderItem.order_id, OrderItem.product_id]
                )
            )

    @staticmethod
    async def _write_warehouse(
        session: AsyncSession, order: VtexOrder, warehouse_id: str
    ) -> None:
        logistics = order.logistics
        store = logistics.pickup_store_info if logistics else None
        address = store.address if store else None
        await session.execute(
            pg_insert(Warehouse)
            .values(
                warehouse_id=warehouse_id,
                warehouse_name=store.friendly_name if store else None,
                address_street=address.street if address else None,
                address_city=address.city if address else None,
                address_state=address.state if address else None,
                address_country=address.country if address else None,
            )
            .on_conflict_do_nothing(index_elements=[Warehouse.warehouse_id])
        )

    @staticmethod
    async def _destination_id(session: AsyncSession, address: VtexAddress) -> int | None:
        """Insert-ignore the destination, then resolve its id by natural key.

        ``RETURNING`` yields nothing when the row already existed, hence the
        lookup.
        """
        result = await session.execute(
            pg_insert(Destination)
            .values(city=address.city, state=address.state, country=address.country)
            .on_conflict_do_nothing(constraint="uq_destinations_natural_key")
            .returning(Destination.destination_id)
        )
        destination_id = result.scalar_one_or_none()
        if destination_id is not None:
            return destination_id

        lookup = await session.execute(
            select(Destination.destination_id)
            .where(
                Destination.city.is_not_distinct_from(address.city),
                Destination.state.is_not_distinct_from(address.state),
                Destination.country.is_not_distinct_from(address.country),
            )
            .order_by(Destination.destination_id)
            .limit(1)
        )
        return lookup.scalar_one_or_none()


class SyncService:
    """Pulls invoiced orders from VTEX and stores them."""

    def __init__(
        self,
        database: Database,
        client: VtexClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client or VtexClient(self.settings)
        self.upserter = OrderUpserter(database)

    async def run(self, start: datetime.date, end: datetime.date) -> SyncResult:
        """Ingest every order invoiced between ``start`` and ``end``.

        Orders whose detail cannot be fetched are skipped and counted; a
        listing failure or a store failure aborts the run.

        Args:
            start: First invoice day.
            end: Last invoice day.

        Returns:
            Counters of the run.
        """
        result = SyncResult(start_date=start, end_date=end)
        with structlog.contextvars.bound_contextvars(sync_run_id=uuid.uuid4().hex):
            await self._run(result)
        return result

    async def _run(self, result: SyncResult) -> None:
        start, end = result.start_date, result.end_date
        started = time.perf_counter()
        logger.info("sync.started", start_date=str(start), end_date=str(end))

        async with self.client:
            async for order_ids in self.client.list_order_pages(start, end):
                for order_id in order_ids:
                    order = await self.client.get_order(order_id)
                    if order is None:
                        result.failed_orders += 1
                    else:
                        await self.upserter.upsert(order)
                        result.total_orders += 1
                    await asyncio.sleep(self.settings.vtex_request_delay_seconds)

        result.duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "sync.completed",
            start_date=str(start),
            end_date=str(end),
            total_orders=result.total_orders,
            failed_orders=result.failed_orders,
            duration_ms=result.duration_ms,
        )
