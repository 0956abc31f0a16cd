"""Tests for aggregate row coercion and shared breakdowns."""

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from app.features.analytics.breakdowns import category_shares, monthly_shares
from app.features.analytics.coercion import as_float, as_int, as_month, with_shares


def test_as_int():
    """Sums arrive as Decimal and empty aggregates as NULL."""
    assert as_int(Decimal("42")) == 42
    assert as_int(None) == 0


def test_as_float():
    """Averages stay None when there is nothing to average."""
    assert as_float(Decimal("1000.0000000000000000")) == 1000.0
    assert as_float(None) is None


def test_as_month():
    """Month buckets become the first day of the month."""
    assert as_month(datetime(2024, 3, 1, 0, 0)) == date(2024, 3, 1)
    assert as_month(date(2024, 3, 1)) == date(2024, 3, 1)
    assert as_month(None) is None


def test_with_shares_empty_population():
    """An empty population yields no breakdown entries."""
    rows = [SimpleNamespace(total_orders=0)]

    assert with_shares(rows, 0, "total_orders") == []
    assert with_shares(rows, None, "total_orders") == []


def test_category_shares_sum_to_hundred():
    """Disjoint categories covering the population should sum to 100."""
    rows = [
        SimpleNamespace(category="Home", total_orders=1, total_quantity=Decimal(4)),
        SimpleNamespace(category="Garden", total_orders=1, total_quantity=Decimal(1)),
        SimpleNamespace(category=None, total_orders=2, total_quantity=None),
    ]

    shares = category_shares(rows, 4)

    assert [s.percentage for s in shares] == [25.0, 25.0, 50.0]
    assert shares[2].category is None
    assert shares[2].total_quantity == 0


def test_monthly_shares_keep_null_month():
    """Orders without an invoice date should form a null-month bucket."""
    rows = [
        SimpleNamespace(month=datetime(2024, 2, 1), total_orders=2, total_quantity=Decimal(5)),
        SimpleNamespace(month=None, total_orders=1, total_quantity=Decimal(1)),
    ]

    shares = monthly_shares(rows, 3)

    assert shares[0].month == date(2024, 2, 1)
    assert shares[0].percentage == 66.67
    assert shares[1].month is None
    assert shares[1].percentage == 33.33
