"""Tests for aggregate rendering and percentage math."""

from datetime import date

import pytest
from sqlalchemy.dialects import postgresql

from app.features.analytics.aggregates import (
    AggregateSpec,
    Dimension,
    ShareBasis,
    build_aggregate,
    population_statement,
    share_pct,
)
from app.features.analytics.breakdowns import category_spec, monthly_spec
from app.features.analytics.fact import FactJoin
from app.features.analytics.filters import DateRange, FilterSet
from app.features.data_platform.models import Warehouse


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


class TestAggregateSpec:
    """Tests for AggregateSpec validation."""

    def test_unknown_measure(self):
        """Unknown measure keys should be rejected."""
        with pytest.raises(ValueError, match="Unknown measures"):
            AggregateSpec(name="x", measures=("total_orders", "revenue"))

    def test_unknown_order_key(self):
        """Ordering by a key that is neither measure nor dimension should fail."""
        with pytest.raises(ValueError, match="order_by references unknown keys"):
            AggregateSpec(name="x", measures=("total_orders",), order_by=(("month", True),))


class TestBuildAggregate:
    """Tests for build_aggregate."""

    def test_summary_has_no_group_by(self):
        """A spec without dimensions should yield one summary row."""
        spec = AggregateSpec(name="summary", measures=("total_orders", "total_value"))

        sql = _sql(build_aggregate(spec, FilterSet()))

        assert "count(DISTINCT orders.order_id) AS total_orders" in sql
        assert "sum(order_items.quantity * order_items.unit_price) AS total_value" in sql
        assert "GROUP BY" not in sql

    def test_month_expression_is_identical_everywhere(self):
        """SELECT, GROUP BY and ORDER BY should share one date_trunc expression."""
        sql = _sql(build_aggregate(monthly_spec("monthly"), FilterSet()))

        assert sql.count("date_trunc('month', orders.invoiced_date)") == 3
        assert "DESC NULLS LAST" in sql

    def test_top_n_and_dimension_join(self):
        """A category breakdown should join products and cap the groups."""
        stmt = build_aggregate(category_spec("categories", top_n=5), FilterSet())

        sql = _sql(stmt)
        assert "JOIN products ON order_items.product_id = products.product_id" in sql
        assert "GROUP BY products.category_name" in sql
        assert "LIMIT" in sql

    def test_dimensions_break_ties(self):
        """Unordered dimensions should be appended as ascending tiebreakers."""
        spec = AggregateSpec(
            name="warehouses",
            measures=("total_orders",),
            dimensions=(
                Dimension("warehouse_id", Warehouse.warehouse_id),
                Dimension("warehouse_name", Warehouse.warehouse_name),
            ),
            joins=frozenset({FactJoin.WAREHOUSE}),
            order_by=(("total_orders", True),),
        )

        sql = _sql(build_aggregate(spec, FilterSet()))

        order_by = sql.split("ORDER BY", 1)[1]
        assert "warehouses.warehouse_id ASC, warehouses.warehouse_name ASC" in order_by

    def test_filter_joins_are_added(self):
        """Joins required by filters should be applied even if the spec has none."""
        spec = AggregateSpec(name="summary", measures=("total_orders",))
        filters = FilterSet().with_city("Cali")

        sql = _sql(build_aggregate(spec, filters))

        assert "JOIN destinations" in sql
        assert "WHERE lower(regexp_replace(" in sql


class TestPopulationStatement:
    """Tests for population_statement."""

    def test_orders_basis(self):
        """The default denominator counts distinct orders."""
        filters = FilterSet().with_date_range(DateRange(start=date(2024, 1, 1)))

        sql = _sql(population_statement(filters))

        assert "count(DISTINCT orders.order_id) AS population" in sql
        assert "orders.invoiced_date >=" in sql

    def test_items_basis(self):
        """The items denominator counts order lines."""
        sql = _sql(population_statement(FilterSet(), ShareBasis.ITEMS))

        assert "count(order_items.product_id) AS population" in sql

    def test_only_filter_joins(self):
        """The population must not inherit a breakdown's joins."""
        sql = _sql(population_statement(FilterSet().with_product("SKU-1")))

        assert "products" not in sql


class TestSharePct:
    """Tests for share_pct."""

    @pytest.mark.parametrize(
        ("bucket", "population", "expected"),
        [
            (1, 3, 33.33),
            (2, 3, 66.67),
            (1, 8, 12.5),
            (1, 800, 0.13),
            (5, 5, 100.0),
            (0, 7, 0.0),
        ],
    )
    def test_rounds_half_up(self, bucket, population, expected):
        """Percentages should round half-up to two decimals."""
        assert share_pct(bucket, population) == expected

    def test_empty_population(self):
        """A zero population has no percentages."""
        with pytest.raises(ValueError):
            share_pct(0, 0)
