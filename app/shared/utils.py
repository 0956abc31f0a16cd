"""Shared utility functions."""

import math

from app.shared.schemas import PaginationMeta


def page_count(total_items: int, limit: int) -> int:
    """Number of pages needed for ``total_items`` rows at ``limit`` per page."""
    return math.ceil(total_items / limit) if total_items > 0 else 0


def build_pagination_meta(total_items: int, page: int, limit: int) -> PaginationMeta:
    """Create pagination metadata from a total count.

    Args:
        total_items: Total count of rows under the request's filters.
        page: Page the rows were taken from.
        limit: Page size used for the query.

    Returns:
        PaginationMeta with computed page count.
    """
    return PaginationMeta(
        total_items=total_items,
        total_pages=page_count(total_items, limit),
        current_page=page,
        items_per_page=limit,
    )
