"""Service layer for per-product distribution reports."""

from typing import Any

from sqlalchemy import Row

from app.core.logging import get_logger
from app.features.analytics.aggregates import (
    AggregateSpec,
    Dimension,
    build_aggregate,
    population_statement,
)
from app.features.analytics.breakdowns import monthly_shares, monthly_spec
from app.features.analytics.coercion import as_float, as_int, with_shares
from app.features.analytics.executor import QueryExecutor
from app.features.analytics.fact import FactJoin
from app.features.analytics.filters import DateRange, FilterSet
from app.features.analytics.pagination import PageRequest, paginate
from app.features.data_platform.models import Destination, Product, Warehouse
from app.features.products.schemas import (
    ProductDestination,
    ProductDistribution,
    ProductSummary,
    WarehouseShare,
)
from app.shared.schemas import PaginationMeta

logger = get_logger(__name__)

# Outer destination join: items without a destination still count toward
# orders, quantity and value.
SUMMARY = AggregateSpec(
    name="products.summary",
    measures=(
        "total_orders",
        "total_quantity",
        "total_value",
        "avg_price",
        "total_cities",
        "total_warehouses",
    ),
    dimensions=(
        Dimension("name", Product.name),
        Dimension("brand_name", Product.brand_name),
        Dimension("category_name", Product.category_name),
    ),
    joins=frozenset({FactJoin.PRODUCT, FactJoin.DESTINATION_OUTER}),
)

WAREHOUSE_STATS = AggregateSpec(
    name="products.warehouse_stats",
    measures=("total_orders", "total_quantity"),
    dimensions=(
        Dimension("warehouse_id", Warehouse.warehouse_id),
        Dimension("warehouse_name", Warehouse.warehouse_name),
    ),
    joins=frozenset({FactJoin.WAREHOUSE}),
    order_by=(("total_orders", True),),
)

TEMPORAL_STATS = monthly_spec("products.temporal_stats")

DESTINATIONS = AggregateSpec(
    name="products.destinations",
    measures=("total_orders", "total_quantity"),
    dimensions=(
        Dimension("city", Destination.city),
        Dimension("state", Destination.state),
        Dimension("country", Destination.country),
    ),
    joins=frozenset({FactJoin.DESTINATION}),
    order_by=(("total_orders", True),),
)


def _summary(row: Row[Any] | None) -> ProductSummary | None:
    if row is None or as_int(row.total_orders) == 0:
        return None
    return ProductSummary(
        name=row.name,
        brand_name=row.brand_name,
        category_name=row.category_name,
        total_orders=as_int(row.total_orders),
        total_quantity=as_int(row.total_quantity),
        total_value=as_int(row.total_value),
        avg_price=as_float(row.avg_price),
        total_cities=as_int(row.total_cities),
        total_warehouses=as_int(row.total_warehouses),
    )


class ProductReportService:
    """Reports scoped to one product."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    @staticmethod
    def _filters(product_id: str, date_range: DateRange) -> FilterSet:
        return FilterSet().with_date_range(date_range).with_product(product_id)

    async def get_distribution(
        self, product_id: str, date_range: DateRange
    ) -> ProductDistribution:
        """Compute a product's totals, warehouse shares and monthly shares.

        Args:
            product_id: Product identifier.
            date_range: Optional invoice-date window.

        Returns:
            Distribution payload; null summary and empty lists when the product
            has no orders in the window.
        """
        filters = self._filters(product_id, date_range)

        summary_row, warehouse_rows, month_rows, population = await self.executor.gather(
            "products.distribution",
            self.executor.fetch_one(build_aggregate(SUMMARY, filters), SUMMARY.name),
            self.executor.fetch_all(
                build_aggregate(WAREHOUSE_STATS, filters), WAREHOUSE_STATS.name
            ),
            self.executor.fetch_all(build_aggregate(TEMPORAL_STATS, filters), TEMPORAL_STATS.name),
            self.executor.scalar(population_statement(filters), "products.population"),
        )

        data = ProductDistribution(
            general_stats=_summary(summary_row),
            warehouse_stats=[
                WarehouseShare(
                    warehouse_id=row.warehouse_id,
                    warehouse_name=row.warehouse_name,
                    total_orders=as_int(row.total_orders),
                    total_quantity=as_int(row.total_quantity),
                    percentage=pct,
                )
                for row, pct in with_shares(warehouse_rows, population, "total_orders")
            ],
            temporal_stats=monthly_shares(month_rows, population),
        )

        logger.info(
            "analytics.product_distribution_computed",
            product_id=product_id,
            total_orders=as_int(population),
            warehouses=len(data.warehouse_stats),
        )
        return data

    async def get_destinations(
        self,
        product_id: str,
        date_range: DateRange,
        page: PageRequest,
    ) -> tuple[list[ProductDestination], PaginationMeta]:
        """Page through the destinations a product shipped to.

        Args:
            product_id: Product identifier.
            date_range: Optional invoice-date window.
            page: Requested page.

        Returns:
            Destination rows of the page and pagination metadata.
        """
        filters = self._filters(product_id, date_range)

        (rows, meta), population = await self.executor.gather(
            "products.destinations",
            paginate(
                self.executor,
                build_aggregate(DESTINATIONS, filters),
                page,
                DESTINATIONS.name,
            ),
            self.executor.scalar(population_statement(filters), "products.population"),
        )

        destinations = [
            ProductDestination(
                city=row.city,
                state=row.state,
                country=row.country,
                total_orders=as_int(row.total_orders),
                total_quantity=as_int(row.total_quantity),
                percentage=pct,
            )
            for row, pct in with_shares(rows, population, "total_orders")
        ]

        logger.info(
            "analytics.product_destinations_computed",
            product_id=product_id,
            total_items=meta.total_items,
            page=meta.current_page,
        )
        return destinations, meta
