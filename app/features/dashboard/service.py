"""Service layer for the global dashboard.

Five aggregates plus the order population run concurrently over the same
date-filtered fact base.
"""

from typing import Any

from sqlalchemy import Row

from app.core.config import get_settings
from app.core.logging import get_logger
from app.features.analytics.aggregates import (
    AggregateSpec,
    Dimension,
    build_aggregate,
    month_bucket,
    population_statement,
)
from app.features.analytics.breakdowns import category_shares, category_spec
from app.features.analytics.coercion import as_int, as_month
from app.features.analytics.executor import QueryExecutor
from app.features.analytics.fact import FactJoin
from app.features.analytics.filters import DateRange, FilterSet
from app.features.dashboard.schemas import (
    DashboardData,
    DashboardSummary,
    MonthlyTrend,
    TopCity,
    TopProduct,
)
from app.features.data_platform.models import Destination, Product

logger = get_logger(__name__)

SUMMARY = AggregateSpec(
    name="dashboard.summary",
    measures=(
        "total_orders",
        "total_quantity",
        "total_value",
        "total_warehouses",
        "total_destinations",
    ),
)

CATEGORY_DISTRIBUTION = category_spec("dashboard.category_distribution")

TEMPORAL_TRENDS = AggregateSpec(
    name="dashboard.temporal_trends",
    measures=("total_orders", "total_quantity", "total_value"),
    dimensions=(Dimension("month", month_bucket()),),
    order_by=(("month", True),),
)


def top_products_spec(top_n: int) -> AggregateSpec:
    """Best-selling products by units."""
    return AggregateSpec(
        name="dashboard.top_products",
        measures=("total_orders", "total_quantity", "total_value"),
        dimensions=(
            Dimension("product_id", Product.product_id),
            Dimension("name", Product.name),
            Dimension("category", Product.category_name),
        ),
        joins=frozenset({FactJoin.PRODUCT}),
        order_by=(("total_quantity", True),),
        top_n=top_n,
    )


def top_cities_spec(top_n: int) -> AggregateSpec:
    """Destinations with the most orders."""
    return AggregateSpec(
        name="dashboard.top_cities",
        measures=("total_orders", "total_quantity", "total_value"),
        dimensions=(
            Dimension("city", Destination.city),
            Dimension("state", Destination.state),
            Dimension("country", Destination.country),
        ),
        joins=frozenset({FactJoin.DESTINATION}),
        order_by=(("total_orders", True),),
        top_n=top_n,
    )


def _summary(row: Row[Any] | None) -> DashboardSummary | None:
    if row is None or as_int(row.total_orders) == 0:
        return None
    return DashboardSummary(
        total_orders=as_int(row.total_orders),
        total_products=as_int(row.total_quantity),
        total_value=as_int(row.total_value),
        total_warehouses=as_int(row.total_warehouses),
        total_cities=as_int(row.total_destinations),
    )


class DashboardService:
    """Computes the global dashboard for an optional date window."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor
        self.settings = get_settings()

    async def get_dashboard(self, date_range: DateRange) -> DashboardData:
        """Compute headline totals, top lists, category shares and monthly trend.

        Args:
            date_range: Optional invoice-date window.

        Returns:
            Dashboard payload; empty lists and a null summary when no orders match.
        """
        filters = FilterSet().with_date_range(date_range)
        top_n = self.settings.analytics_top_n
        top_products = top_products_spec(top_n)
        top_cities = top_cities_spec(top_n)

        summary_row, product_rows, city_rows, category_rows, trend_rows, population = (
            await self.executor.gather(
                "dashboard",
                self.executor.fetch_one(build_aggregate(SUMMARY, filters), SUMMARY.name),
                self.executor.fetch_all(
                    build_aggregate(top_products, filters), top_products.name
                ),
                self.executor.fetch_all(build_aggregate(top_cities, filters), top_cities.name),
                self.executor.fetch_all(
                    build_aggregate(CATEGORY_DISTRIBUTION, filters),
                    CATEGORY_DISTRIBUTION.name,
                ),
                self.executor.fetch_all(
                    build_aggregate(TEMPORAL_TRENDS, filters), TEMPORAL_TRENDS.name
                ),
                self.executor.scalar(population_statement(filters), "dashboard.population"),
            )
        )

        data = DashboardData(
            general_metrics=_summary(summary_row),
            top_products=[
                TopProduct(
                    id=row.product_id,
                    name=row.name,
                    category=row.category,
                    total_orders=as_int(row.total_orders),
                    total_quantity=as_int(row.total_quantity),
                    total_value=as_int(row.total_value),
                )
                for row in product_rows
            ],
            top_cities=[
                TopCity(
                    city=row.city,
                    state=row.state,
                    country=row.country,
                    total_orders=as_int(row.total_orders),
                    total_quantity=as_int(row.total_quantity),
                    total_value=as_int(row.total_value),
                )
                for row in city_rows
            ],
            category_distribution=category_shares(category_rows, population),
            temporal_trends=[
                MonthlyTrend(
                    month=as_month(row.month),
                    total_orders=as_int(row.total_orders),
                    total_quantity=as_int(row.total_quantity),
                    total_value=as_int(row.total_value),
                )
                for row in trend_rows
            ],
        )

        logger.info(
            "analytics.dashboard_computed",
            start_date=str(date_range.start) if date_range.start else None,
            end_date=str(date_range.end) if date_range.end else None,
            total_orders=data.general_metrics.total_orders if data.general_metrics else 0,
            top_products=len(data.top_products),
            months=len(data.temporal_trends),
        )
        return data
