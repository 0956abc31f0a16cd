"""Breakdowns that appear in more than one report family."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Row

from app.features.analytics.aggregates import AggregateSpec, Dimension, month_bucket
from app.features.analytics.coercion import as_int, as_month, with_shares
from app.features.analytics.fact import FactJoin
from app.features.analytics.schemas import CategoryShare, MonthlyShare
from app.features.data_platform.models import Product


def monthly_spec(name: str) -> AggregateSpec:
    """Orders and units per invoice month, newest first."""
    return AggregateSpec(
        name=name,
        measures=("total_orders", "total_quantity"),
        dimensions=(Dimension("month", month_bucket()),),
        order_by=(("month", True),),
    )


def category_spec(name: str, top_n: int | None = None) -> AggregateSpec:
    """Orders and units per product category, most orders first."""
    return AggregateSpec(
        name=name,
        measures=("total_orders", "total_quantity"),
        dimensions=(Dimension("category", Product.category_name),),
        joins=frozenset({FactJoin.PRODUCT}),
        order_by=(("total_orders", True),),
        top_n=top_n,
    )


def monthly_shares(rows: Sequence[Row[Any]], population: int | None) -> list[MonthlyShare]:
    """Convert ``monthly_spec`` rows into share models."""
    return [
        MonthlyShare(
            month=as_month(row.month),
            total_orders=as_int(row.total_orders),
            total_quantity=as_int(row.total_quantity),
            percentage=pct,
        )
        for row, pct in with_shares(rows, population, "total_orders")
    ]


def category_shares(rows: Sequence[Row[Any]], population: int | None) -> list[CategoryShare]:
    """Convert ``category_spec`` rows into share models."""
    return [
        CategoryShare(
            category=row.category,
            total_orders=as_int(row.total_orders),
            total_quantity=as_int(row.total_quantity),
            percentage=pct,
        )
        for row, pct in with_shares(rows, population, "total_orders")
    ]
