"""Service layer for the movements report."""

from app.core.logging import get_logger
from app.features.analytics.aggregates import AggregateSpec, Dimension, build_aggregate
from app.features.analytics.coercion import as_int
from app.features.analytics.executor import QueryExecutor
from app.features.analytics.fact import FactJoin
from app.features.analytics.filters import DateRange, FilterSet
from app.features.analytics.pagination import PageRequest, paginate
from app.features.analytics.schemas import CityLocation
from app.features.data_platform.models import Destination, Order, Product, Warehouse
from app.features.movements.schemas import (
    Movement,
    MovementDetail,
    MovementProduct,
    MovementWarehouse,
)
from app.shared.schemas import PaginationMeta

logger = get_logger(__name__)

MOVEMENTS = AggregateSpec(
    name="movements",
    measures=("total_quantity", "total_value"),
    dimensions=(
        Dimension("product_id", Product.product_id),
        Dimension("product_name", Product.name),
        Dimension("category_name", Product.category_name),
        Dimension("warehouse_id", Warehouse.warehouse_id),
        Dimension("warehouse_name", Warehouse.warehouse_name),
        Dimension("destination_city", Destination.city),
        Dimension("destination_state", Destination.state),
        Dimension("destination_country", Destination.country),
        Dimension("invoiced_date", Order.invoiced_date),
        Dimension("status", Order.status),
    ),
    joins=frozenset({FactJoin.PRODUCT, FactJoin.WAREHOUSE, FactJoin.DESTINATION}),
    order_by=(("invoiced_date", True),),
)


def movement_filters(
    date_range: DateRange,
    product_id: str | None = None,
    warehouse_id: str | None = None,
    city_id: str | None = None,
) -> FilterSet:
    """Compose the date window with any entity filters that were given."""
    filters = FilterSet().with_date_range(date_range)
    if product_id:
        filters = filters.with_product(product_id)
    if warehouse_id:
        filters = filters.with_warehouse(warehouse_id)
    if city_id:
        filters = filters.with_city(city_id)
    return filters


class MovementService:
    """Lists grouped product movements."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    async def list_movements(
        self,
        date_range: DateRange,
        page: PageRequest,
        product_id: str | None = None,
        warehouse_id: str | None = None,
        city_id: str | None = None,
    ) -> tuple[list[Movement], PaginationMeta]:
        """Page through movements in a complete date window.

        Args:
            date_range: Invoice-date window with both bounds.
            page: Requested page.
            product_id: Restrict to one product (optional).
            warehouse_id: Restrict to one warehouse (optional).
            city_id: Restrict to one destination city, matched by normalized
                name (optional).

        Returns:
            Movements of the page, newest first, and pagination metadata.
        """
        if not date_range.is_complete:
            raise ValueError("movements require both date bounds")

        filters = movement_filters(date_range, product_id, warehouse_id, city_id)
        rows, meta = await paginate(
            self.executor, build_aggregate(MOVEMENTS, filters), page, MOVEMENTS.name
        )

        movements = [
            Movement(
                product=MovementProduct(
                    id=row.product_id, name=row.product_name, category=row.category_name
                ),
                warehouse=MovementWarehouse(id=row.warehouse_id, name=row.warehouse_name),
                destination=CityLocation(
                    city=row.destination_city,
                    state=row.destination_state,
                    country=row.destination_country,
                ),
                movement=MovementDetail(
                    quantity=as_int(row.total_quantity),
                    value=as_int(row.total_value),
                    date=row.invoiced_date,
                    status=row.status,
                ),
            )
            for row in rows
        ]

        logger.info(
            "analytics.movements_computed",
            start_date=str(date_range.start),
            end_date=str(date_range.end),
            filters=len(filters.predicates),
            total_items=meta.total_items,
            page=meta.current_page,
        )
        return movements, meta
