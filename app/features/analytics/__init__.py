"""Query layer shared by every report: filters, aggregates, pagination.

Report families (dashboard, products, destinations, warehouses, movements)
live in their own feature slices and compose these building blocks.
"""

from app.features.analytics.aggregates import (
    AggregateSpec,
    Dimension,
    ShareBasis,
    build_aggregate,
    population_statement,
    share_pct,
)
from app.features.analytics.executor import QueryExecutor, get_executor
from app.features.analytics.filters import DateRange, FilterSet
from app.features.analytics.normalization import normalize_city_name
from app.features.analytics.pagination import PageRequest, paginate

__all__ = [
    "AggregateSpec",
    "DateRange",
    "Dimension",
    "FilterSet",
    "PageRequest",
    "QueryExecutor",
    "ShareBasis",
    "build_aggregate",
    "get_executor",
    "normalize_city_name",
    "paginate",
    "population_statement",
    "share_pct",
]
