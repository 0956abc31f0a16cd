"""Generic filtered aggregate over the order-item fact table.

Every report in the API is a declarative ``AggregateSpec``: which measures to
compute, which dimensions to group by, which joins are needed, how to order
and whether to keep only the top N groups. ``build_aggregate`` renders a spec
plus a ``FilterSet`` into a single ``Select``.

Percentages are not computed in SQL. ``population_statement`` counts the
filtered population under the same filters and ``share_pct`` divides in
Python, where an empty population can be guarded explicitly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, Select, distinct, func, literal_column, select

from app.features.analytics.fact import FactJoin, apply_fact_joins
from app.features.analytics.filters import FilterSet
from app.features.data_platform.models import Destination, Order, OrderItem

# =============================================================================
# Measure catalogue
# =============================================================================

MEASURES: dict[str, Callable[[], ColumnElement[Any]]] = {
    "total_orders": lambda: func.count(distinct(Order.order_id)),
    "total_quantity": lambda: func.sum(OrderItem.quantity),
    "total_value": lambda: func.sum(OrderItem.quantity * OrderItem.unit_price),
    "item_count": lambda: func.count(OrderItem.product_id),
    "avg_price": lambda: func.avg(OrderItem.unit_price),
    "total_warehouses": lambda: func.count(distinct(OrderItem.warehouse_id)),
    "total_destinations": lambda: func.count(distinct(OrderItem.destination_id)),
    "total_cities": lambda: func.count(distinct(Destination.city)),
    "total_products": lambda: func.count(distinct(OrderItem.product_id)),
}


def month_bucket() -> ColumnElement[Any]:
    """Invoice timestamp truncated to the first instant of its month.

    The unit is rendered inline so SELECT and GROUP BY carry the identical
    expression.
    """
    return func.date_trunc(literal_column("'month'"), Order.invoiced_date)


class ShareBasis(str, Enum):
    """Population a breakdown's percentages are relative to."""

    ORDERS = "orders"  # COUNT(DISTINCT order_id)
    ITEMS = "items"  # COUNT(order_items.product_id)


@dataclass(frozen=True)
class Dimension:
    """A labelled grouping expression."""

    key: str
    expression: ColumnElement[Any]


@dataclass(frozen=True)
class AggregateSpec:
    """Declarative description of one aggregate query.

    Attributes:
        name: Identifier used in logs.
        measures: Keys into ``MEASURES``.
        dimensions: Grouping expressions (empty for a single summary row).
        joins: Dimension joins required by measures or dimensions.
        order_by: ``(key, descending)`` pairs; keys name measures or dimensions.
        top_n: Keep only the first N groups.
    """

    name: str
    measures: tuple[str, ...]
    dimensions: tuple[Dimension, ...] = ()
    joins: frozenset[FactJoin] = field(default_factory=frozenset)
    order_by: tuple[tuple[str, bool], ...] = ()
    top_n: int | None = None

    def __post_init__(self) -> None:
        unknown = [m for m in self.measures if m not in MEASURES]
        if unknown:
            raise ValueError(f"Unknown measures: {unknown}")
        known = set(self.measures) | {d.key for d in self.dimensions}
        missing = [key for key, _ in self.order_by if key not in known]
        if missing:
            raise ValueError(f"order_by references unknown keys: {missing}")


def build_aggregate(spec: AggregateSpec, filters: FilterSet) -> Select[Any]:
    """Render an aggregate spec under a filter set.

    Every dimension is appended to ORDER BY as an ascending tiebreaker so the
    result has a total order and can be paginated deterministically.

    Args:
        spec: Aggregate description.
        filters: Predicates of the current request.

    Returns:
        Executable ``Select``.
    """
    measure_columns = {key: MEASURES[key]() for key in spec.measures}
    columns: list[ColumnElement[Any]] = [d.expression.label(d.key) for d in spec.dimensions]
    columns += [expr.label(key) for key, expr in measure_columns.items()]

    stmt = apply_fact_joins(select(*columns), spec.joins | filters.joins)
    stmt = filters.apply(stmt)

    if spec.dimensions:
        stmt = stmt.group_by(*(d.expression for d in spec.dimensions))

    expressions = {d.key: d.expression for d in spec.dimensions} | measure_columns
    ordering = [
        expressions[key].desc().nulls_last() if descending else expressions[key].asc()
        for key, descending in spec.order_by
    ]
    ordered_keys = {key for key, _ in spec.order_by}
    ordering += [d.expression.asc() for d in spec.dimensions if d.key not in ordered_keys]
    if ordering:
        stmt = stmt.order_by(*ordering)

    if spec.top_n is not None:
        stmt = stmt.limit(spec.top_n)
    return stmt


def population_statement(filters: FilterSet, basis: ShareBasis = ShareBasis.ORDERS) -> Select[Any]:
    """Count the filtered population used as every percentage's denominator.

    Only the joins the filters need are applied, never a breakdown's own
    joins, so the denominator is the whole filtered population.
    """
    if basis is ShareBasis.ORDERS:
        measure = MEASURES["total_orders"]()
    else:
        measure = MEASURES["item_count"]()
    stmt = apply_fact_joins(select(measure.label("population")), filters.joins)
    return filters.apply(stmt)


def share_pct(bucket: int, population: int) -> float:
    """Percentage of the population, rounded half-up to two decimals.

    Args:
        bucket: Count in one breakdown group.
        population: Count of the whole filtered population (must be > 0).

    Returns:
        ``round(100 * bucket / population, 2)`` as float.
    """
    if population <= 0:
        raise ValueError("population must be positive to compute a percentage")
    ratio = Decimal(100 * bucket) / Decimal(population)
    return float(ratio.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
