"""Service layer for destination-city reports.

A city is addressed by a free-form identifier; every destination whose
normalized city name equals the identifier's normalized form belongs to it.
"""

from typing import Any

from sqlalchemy import Row

from app.core.config import get_settings
from app.core.logging import get_logger
from app.features.analytics.aggregates import (
    AggregateSpec,
    Dimension,
    build_aggregate,
    population_statement,
)
from app.features.analytics.breakdowns import (
    category_shares,
    category_spec,
    monthly_shares,
    monthly_spec,
)
from app.features.analytics.coercion import as_int, with_shares
from app.features.analytics.executor import QueryExecutor
from app.features.analytics.fact import FactJoin
from app.features.analytics.filters import DateRange, FilterSet
from app.features.analytics.pagination import PageRequest, paginate
from app.features.data_platform.models import Destination, Warehouse
from app.features.destinations.schemas import (
    CityStats,
    CitySummary,
    CityWarehouse,
    WarehouseAddress,
)
from app.shared.schemas import PaginationMeta

logger = get_logger(__name__)

TOTALS = AggregateSpec(
    name="destinations.totals",
    measures=(
        "total_orders",
        "total_quantity",
        "total_value",
        "total_warehouses",
        "total_products",
    ),
)

LABEL = AggregateSpec(
    name="destinations.label",
    measures=("total_orders",),
    dimensions=(
        Dimension("city", Destination.city),
        Dimension("state", Destination.state),
        Dimension("country", Destination.country),
    ),
    joins=frozenset({FactJoin.DESTINATION}),
    order_by=(("total_orders", True),),
    top_n=1,
)

TEMPORAL_STATS = monthly_spec("destinations.temporal_stats")

WAREHOUSES = AggregateSpec(
    name="destinations.warehouses",
    measures=("total_orders", "total_quantity"),
    dimensions=(
        Dimension("warehouse_id", Warehouse.warehouse_id),
        Dimension("warehouse_name", Warehouse.warehouse_name),
        Dimension("address_street", Warehouse.address_street),
        Dimension("address_city", Warehouse.address_city),
        Dimension("address_state", Warehouse.address_state),
        Dimension("address_country", Warehouse.address_country),
    ),
    joins=frozenset({FactJoin.WAREHOUSE}),
    order_by=(("total_orders", True),),
)


def _summary(totals: Row[Any] | None, label: Row[Any] | None) -> CitySummary | None:
    if totals is None or label is None or as_int(totals.total_orders) == 0:
        return None
    return CitySummary(
        city=label.city,
        state=label.state,
        country=label.country,
        total_orders=as_int(totals.total_orders),
        total_quantity=as_int(totals.total_quantity),
        total_value=as_int(totals.total_value),
        total_warehouses=as_int(totals.total_warehouses),
        total_products=as_int(totals.total_products),
    )


class CityReportService:
    """Reports scoped to one destination city."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor
        self.settings = get_settings()

    @staticmethod
    def _filters(city_id: str, date_range: DateRange) -> FilterSet:
        filters = FilterSet().with_date_range(date_range).with_city(city_id)
        if filters.matches_nothing:
            logger.info("analytics.city_key_empty", city_id=city_id)
        return filters

    async def get_stats(self, city_id: str, date_range: DateRange) -> CityStats:
        """Compute a city's totals, top categories and monthly shares.

        Args:
            city_id: Free-form city identifier (normalized before matching).
            date_range: Optional invoice-date window.

        Returns:
            City payload; null summary and empty lists when nothing matches.
        """
        filters = self._filters(city_id, date_range)
        categories = category_spec(
            "destinations.category_stats", top_n=self.settings.analytics_top_n
        )

        totals, label, category_rows, month_rows, population = await self.executor.gather(
            "destinations.stats",
            self.executor.fetch_one(build_aggregate(TOTALS, filters), TOTALS.name),
            self.executor.fetch_one(build_aggregate(LABEL, filters), LABEL.name),
            self.executor.fetch_all(build_aggregate(categories, filters), categories.name),
            self.executor.fetch_all(build_aggregate(TEMPORAL_STATS, filters), TEMPORAL_STATS.name),
            self.executor.scalar(population_statement(filters), "destinations.population"),
        )

        data = CityStats(
            general_stats=_summary(totals, label),
            category_stats=category_shares(category_rows, population),
            temporal_stats=monthly_shares(month_rows, population),
        )

        logger.info(
            "analytics.city_stats_computed",
            city_id=city_id,
            total_orders=as_int(population),
            months=len(data.temporal_stats),
        )
        return data

    async def get_warehouses(
        self,
        city_id: str,
        date_range: DateRange,
        page: PageRequest,
    ) -> tuple[list[CityWarehouse], PaginationMeta]:
        """Page through the warehouses that shipped to a city.

        Args:
            city_id: Free-form city identifier.
            date_range: Optional invoice-date window.
            page: Requested page.

        Returns:
            Warehouse rows of the page and pagination metadata.
        """
        filters = self._filters(city_id, date_range)

        (rows, meta), population = await self.executor.gather(
            "destinations.warehouses",
            paginate(self.executor, build_aggregate(WAREHOUSES, filters), page, WAREHOUSES.name),
            self.executor.scalar(population_statement(filters), "destinations.population"),
        )

        warehouses = [
            CityWarehouse(
                warehouse_id=row.warehouse_id,
                warehouse_name=row.warehouse_name,
                address=WarehouseAddress(
                    street=row.address_street,
                    city=row.address_city,
                    state=row.address_state,
                    country=row.address_country,
                ),
                total_orders=as_int(row.total_orders),
                total_quantity=as_int(row.total_quantity),
                percentage=pct,
            )
            for row, pct in with_shares(rows, population, "total_orders")
        ]

        logger.info(
            "analytics.city_warehouses_computed",
            city_id=city_id,
            total_items=meta.total_items,
            page=meta.current_page,
        )
        return warehouses, meta
