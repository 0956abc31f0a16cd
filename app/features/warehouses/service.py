"""Service layer for warehouse reports."""

from typing import Any

from sqlalchemy import Row, Select, select

from app.core.config import get_settings
from app.core.logging import get_logger
from app.features.analytics.aggregates import (
    AggregateSpec,
    Dimension,
    ShareBasis,
    build_aggregate,
    population_statement,
)
from app.features.analytics.coercion import as_int, with_shares
from app.features.analytics.executor import QueryExecutor
from app.features.analytics.fact import FactJoin, apply_fact_joins
from app.features.analytics.filters import DateRange, FilterSet
from app.features.analytics.pagination import PageRequest, paginate
from app.features.data_platform.models import Destination, Order, OrderItem, Product
from app.features.warehouses.schemas import (
    CategoryItemShare,
    CityOrderShare,
    WarehouseLineItem,
    WarehouseStats,
    WarehouseSummary,
)
from app.shared.schemas import PaginationMeta

logger = get_logger(__name__)

SUMMARY = AggregateSpec(
    name="warehouses.summary",
    measures=("total_orders", "item_count", "total_quantity", "total_value"),
)

# Category shares are relative to line items, not orders.
CATEGORY_STATS = AggregateSpec(
    name="warehouses.category_stats",
    measures=("item_count", "total_quantity"),
    dimensions=(Dimension("category", Product.category_name),),
    joins=frozenset({FactJoin.PRODUCT}),
    order_by=(("item_count", True),),
)


def top_cities_spec(top_n: int) -> AggregateSpec:
    """Destinations with the most orders from the warehouse."""
    return AggregateSpec(
        name="warehouses.top_cities",
        measures=("total_orders",),
        dimensions=(
            Dimension("city", Destination.city),
            Dimension("state", Destination.state),
            Dimension("country", Destination.country),
        ),
        joins=frozenset({FactJoin.DESTINATION}),
        order_by=(("total_orders", True),),
        top_n=top_n,
    )


def line_items_statement(filters: FilterSet) -> Select[Any]:
    """Unaggregated line items, newest invoice first.

    Destination is outer-joined so items without one are still listed.
    """
    stmt = select(
        Product.product_id,
        Product.name,
        Product.brand_name,
        Product.category_name,
        OrderItem.quantity,
        OrderItem.unit_price,
        Order.invoiced_date,
        Destination.city.label("destination_city"),
        Destination.state.label("destination_state"),
        Destination.country.label("destination_country"),
    )
    stmt = apply_fact_joins(
        stmt, frozenset({FactJoin.PRODUCT, FactJoin.DESTINATION_OUTER}) | filters.joins
    )
    stmt = filters.apply(stmt)
    return stmt.order_by(
        Order.invoiced_date.desc().nulls_last(),
        OrderItem.order_id.asc(),
        OrderItem.product_id.asc(),
    )


def _summary(row: Row[Any] | None) -> WarehouseSummary | None:
    if row is None or as_int(row.total_orders) == 0:
        return None
    total_orders = as_int(row.total_orders)
    item_count = as_int(row.item_count)
    return WarehouseSummary(
        total_orders=total_orders,
        total_products=item_count,
        total_quantity=as_int(row.total_quantity),
        total_value=as_int(row.total_value),
        avg_products_per_order=round(item_count / total_orders, 2),
    )


class WarehouseReportService:
    """Reports scoped to one warehouse."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor
        self.settings = get_settings()

    @staticmethod
    def _filters(warehouse_id: str, date_range: DateRange) -> FilterSet:
        return FilterSet().with_date_range(date_range).with_warehouse(warehouse_id)

    async def get_stats(self, warehouse_id: str, date_range: DateRange) -> WarehouseStats:
        """Compute a warehouse's totals, category shares and top destinations.

        Args:
            warehouse_id: Warehouse identifier.
            date_range: Optional invoice-date window.

        Returns:
            Warehouse payload; null summary and empty lists when nothing shipped.
        """
        filters = self._filters(warehouse_id, date_range)
        top_cities = top_cities_spec(self.settings.analytics_top_n)

        summary_row, category_rows, city_rows, item_population, order_population = (
            await self.executor.gather(
                "warehouses.stats",
                self.executor.fetch_one(build_aggregate(SUMMARY, filters), SUMMARY.name),
                self.executor.fetch_all(
                    build_aggregate(CATEGORY_STATS, filters), CATEGORY_STATS.name
                ),
                self.executor.fetch_all(build_aggregate(top_cities, filters), top_cities.name),
                self.executor.scalar(
                    population_statement(filters, ShareBasis.ITEMS),
                    "warehouses.item_population",
                ),
                self.executor.scalar(
                    population_statement(filters, ShareBasis.ORDERS),
                    "warehouses.order_population",
                ),
            )
        )

        data = WarehouseStats(
            general_stats=_summary(summary_row),
            category_stats=[
                CategoryItemShare(
                    category=row.category,
                    product_count=as_int(row.item_count),
                    total_quantity=as_int(row.total_quantity),
                    percentage=pct,
                )
                for row, pct in with_shares(category_rows, item_population, "item_count")
            ],
            top_cities=[
                CityOrderShare(
                    city=row.city,
                    state=row.state,
                    country=row.country,
                    order_count=as_int(row.total_orders),
                    percentage=pct,
                )
                for row, pct in with_shares(city_rows, order_population, "total_orders")
            ],
        )

        logger.info(
            "analytics.warehouse_stats_computed",
            warehouse_id=warehouse_id,
            total_orders=as_int(order_population),
            categories=len(data.category_stats),
        )
        return data

    async def get_line_items(
        self,
        warehouse_id: str,
        date_range: DateRange,
        page: PageRequest,
    ) -> tuple[list[WarehouseLineItem], PaginationMeta]:
        """Page through the line items a warehouse shipped.

        Args:
            warehouse_id: Warehouse identifier.
            date_range: Optional invoice-date window.
            page: Requested page.

        Returns:
            Line items of the page and pagination metadata.
        """
        filters = self._filters(warehouse_id, date_range)

        rows, meta = await paginate(
            self.executor, line_items_statement(filters), page, "warehouses.products"
        )

        items = [
            WarehouseLineItem(
                product_id=row.product_id,
                name=row.name,
                brand_name=row.brand_name,
                category_name=row.category_name,
                quantity=row.quantity,
                unit_price=row.unit_price,
                invoiced_date=row.invoiced_date,
                destination_city=row.destination_city,
                destination_state=row.destination_state,
                destination_country=row.destination_country,
            )
            for row in rows
        ]

        logger.info(
            "analytics.warehouse_products_computed",
            warehouse_id=warehouse_id,
            total_items=meta.total_items,
            page=meta.current_page,
        )
        return items, meta
