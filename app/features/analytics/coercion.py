"""Numeric coercion of aggregate result rows.

PostgreSQL returns ``SUM`` of integers as ``numeric`` (``Decimal``) and any
aggregate over zero non-NULL inputs as NULL. Report models want plain ints and
floats, so every aggregate column passes through one of these helpers.
"""

from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Row

from app.features.analytics.aggregates import share_pct


def as_int(value: int | Decimal | None) -> int:
    """Count or sum as int; NULL becomes 0."""
    return int(value) if value is not None else 0


def as_float(value: float | Decimal | None) -> float | None:
    """Average as float; NULL stays None."""
    return float(value) if value is not None else None


def as_month(value: datetime | date | None) -> date | None:
    """``date_trunc('month', ...)`` timestamp as the first day of its month."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def with_shares(
    rows: Sequence[Row[Any]],
    population: int | None,
    count_key: str,
) -> list[tuple[Row[Any], float]]:
    """Pair each breakdown row with its percentage of the population.

    Args:
        rows: Breakdown rows.
        population: Size of the filtered population.
        count_key: Row attribute holding the bucket count.

    Returns:
        ``(row, percentage)`` pairs; empty when the population is empty.
    """
    total = as_int(population)
    if total == 0:
        return []
    return [(row, share_pct(as_int(getattr(row, count_key)), total)) for row in rows]
