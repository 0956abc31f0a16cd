"""The fact base every analytics query starts from.

``order_items JOIN orders`` plus whichever dimension joins a query or its
filters need. Joins are applied in one fixed order so that two statements
asking for the same joins render the same FROM clause.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from sqlalchemy import Select

from app.features.data_platform.models import (
    Destination,
    Order,
    OrderItem,
    Product,
    Warehouse,
)


class FactJoin(str, Enum):
    """Dimension joins available on top of the fact base."""

    PRODUCT = "product"
    WAREHOUSE = "warehouse"
    DESTINATION = "destination"
    DESTINATION_OUTER = "destination_outer"


_JOIN_ORDER = (
    FactJoin.PRODUCT,
    FactJoin.WAREHOUSE,
    FactJoin.DESTINATION,
    FactJoin.DESTINATION_OUTER,
)


def resolve_joins(joins: Iterable[FactJoin]) -> list[FactJoin]:
    """Deduplicate and order joins.

    An inner destination join supersedes the outer one: a filter that needs a
    destination excludes rows without one anyway.
    """
    wanted = set(joins)
    if FactJoin.DESTINATION in wanted:
        wanted.discard(FactJoin.DESTINATION_OUTER)
    return [join for join in _JOIN_ORDER if join in wanted]


def apply_fact_joins(stmt: Select[Any], joins: Iterable[FactJoin]) -> Select[Any]:
    """Attach the fact base and the requested dimension joins to a statement.

    Args:
        stmt: Statement whose columns reference the fact tables.
        joins: Dimension joins to add.

    Returns:
        Statement selecting from ``order_items JOIN orders`` plus joins.
    """
    stmt = stmt.select_from(OrderItem).join(Order, OrderItem.order_id == Order.order_id)
    for join in resolve_joins(joins):
        if join is FactJoin.PRODUCT:
            stmt = stmt.join(Product, OrderItem.product_id == Product.product_id)
        elif join is FactJoin.WAREHOUSE:
            stmt = stmt.join(Warehouse, OrderItem.warehouse_id == Warehouse.warehouse_id)
        elif join is FactJoin.DESTINATION:
            stmt = stmt.join(
                Destination, OrderItem.destination_id == Destination.destination_id
            )
        else:  # DESTINATION_OUTER
            stmt = stmt.outerjoin(
                Destination, OrderItem.destination_id == Destination.destination_id
            )
    return stmt
