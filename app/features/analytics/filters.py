"""Filter builder shared by every report query.

A ``FilterSet`` is an immutable sequence of predicates. Each predicate owns a
``bindparam`` whose name is derived from its position in the sequence, so the
parameters handed to the driver always line up with the rendered
placeholders no matter which filters are present.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any

from sqlalchemy import BindParameter, ColumnElement, Select, bindparam, false

from app.features.analytics.fact import FactJoin
from app.features.analytics.normalization import city_key_expression, normalize_city_name
from app.features.data_platform.models import Destination, Order, OrderItem

END_OF_DAY = time(23, 59, 59)


@dataclass(frozen=True)
class DateRange:
    """Optional inclusive calendar-date window over ``orders.invoiced_date``.

    Attributes:
        start: First day included (None = unbounded).
        end: Last day included (None = unbounded).
    """

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("startDate must be on or before endDate")

    @property
    def start_at(self) -> datetime | None:
        """Start bound at 00:00:00."""
        return datetime.combine(self.start, time.min) if self.start is not None else None

    @property
    def end_at(self) -> datetime | None:
        """End bound at 23:59:59."""
        return datetime.combine(self.end, END_OF_DAY) if self.end is not None else None

    @property
    def is_complete(self) -> bool:
        """True when both bounds are present."""
        return self.start is not None and self.end is not None


@dataclass(frozen=True)
class Predicate:
    """One filter clause with its bound parameter and required joins."""

    kind: str
    clause: ColumnElement[bool]
    param: BindParameter[Any] | None = None
    joins: frozenset[FactJoin] = field(default_factory=frozenset)


@dataclass(frozen=True)
class FilterSet:
    """Ordered, immutable collection of filter predicates."""

    predicates: tuple[Predicate, ...] = ()

    def _append(
        self,
        kind: str,
        value: Any,
        build: Callable[[BindParameter[Any]], ColumnElement[bool]],
        joins: frozenset[FactJoin] = frozenset(),
    ) -> FilterSet:
        param = bindparam(f"{kind}_{len(self.predicates) + 1}", value)
        predicate = Predicate(kind=kind, clause=build(param), param=param, joins=joins)
        return FilterSet(self.predicates + (predicate,))

    def with_date_range(self, date_range: DateRange) -> FilterSet:
        """Add zero, one or two invoice-date bounds."""
        filters = self
        if date_range.start_at is not None:
            filters = filters._append(
                "start_date", date_range.start_at, lambda p: Order.invoiced_date >= p
            )
        if date_range.end_at is not None:
            filters = filters._append(
                "end_date", date_range.end_at, lambda p: Order.invoiced_date <= p
            )
        return filters

    def with_product(self, product_id: str) -> FilterSet:
        """Restrict to line items of one product."""
        return self._append("product_id", product_id, lambda p: OrderItem.product_id == p)

    def with_warehouse(self, warehouse_id: str) -> FilterSet:
        """Restrict to line items shipped from one warehouse."""
        return self._append("warehouse_id", warehouse_id, lambda p: OrderItem.warehouse_id == p)

    def with_city(self, city_id: str) -> FilterSet:
        """Restrict to destinations whose normalized city equals ``city_id``'s.

        An identifier that normalizes to ``""`` matches nothing.
        """
        joins = frozenset({FactJoin.DESTINATION})
        city_key = normalize_city_name(city_id)
        if not city_key:
            return FilterSet(
                self.predicates + (Predicate(kind="city_key", clause=false(), joins=joins),)
            )
        return self._append(
            "city_key",
            city_key,
            lambda p: city_key_expression(Destination.city) == p,
            joins=joins,
        )

    @property
    def clauses(self) -> list[ColumnElement[bool]]:
        """Predicate clauses in insertion order."""
        return [predicate.clause for predicate in self.predicates]

    @property
    def joins(self) -> frozenset[FactJoin]:
        """Joins the predicates need to be evaluable."""
        required: set[FactJoin] = set()
        for predicate in self.predicates:
            required |= predicate.joins
        return frozenset(required)

    @property
    def params(self) -> dict[str, Any]:
        """Bound parameter values keyed by placeholder name."""
        return {
            predicate.param.key: predicate.param.value
            for predicate in self.predicates
            if predicate.param is not None
        }

    @property
    def matches_nothing(self) -> bool:
        """True if a predicate is the constant-false no-match clause."""
        return any(predicate.param is None for predicate in self.predicates)

    def apply(self, stmt: Select[Any]) -> Select[Any]:
        """Add every predicate to a statement's WHERE clause."""
        if not self.predicates:
            return stmt
        return stmt.where(*self.clauses)
