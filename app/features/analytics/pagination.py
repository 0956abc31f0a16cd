"""Offset/limit windowing with an exact companion count.

The windowed query and the count query are both derived from the same base
``Select``, so they share joins and predicates by construction.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Row, Select, func, select

from app.core.logging import get_logger
from app.features.analytics.executor import QueryExecutor
from app.shared.schemas import PaginationMeta
from app.shared.utils import build_pagination_meta, page_count

logger = get_logger(__name__)

# OFFSET is sent to PostgreSQL as a 32-bit integer.
MAX_OFFSET = 2**31 - 1


@dataclass(frozen=True)
class PageRequest:
    """Requested page (1-indexed) and page size."""

    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        """SQL offset of the first row of the page."""
        return (self.page - 1) * self.limit


def count_statement(base: Select[Any]) -> Select[Any]:
    """Count the rows ``base`` would return without windowing."""
    return select(func.count()).select_from(base.order_by(None).subquery("page_source"))


def window_statement(base: Select[Any], page: int, limit: int) -> Select[Any]:
    """Restrict ``base`` to one page."""
    return base.limit(limit).offset((page - 1) * limit)


async def paginate(
    executor: QueryExecutor,
    base: Select[Any],
    page: PageRequest,
    name: str,
) -> tuple[Sequence[Row[Any]], PaginationMeta]:
    """Fetch one page of ``base`` plus pagination metadata.

    Count and window run concurrently. If rows exist but the requested page
    lies past the last one, the last page is returned instead, so
    ``currentPage <= totalPages`` whenever ``totalItems > 0``.

    Args:
        executor: Query executor for this request.
        base: Ordered, unwindowed statement.
        page: Requested page.
        name: Query name for logging.

    Returns:
        Rows of the page actually returned and its metadata.
    """
    total, rows = await executor.gather(
        name,
        executor.scalar(count_statement(base), f"{name}.count"),
        executor.fetch_all(window_statement(base, page.page, page.limit), f"{name}.window"),
    )
    total_items = int(total or 0)
    current_page = page.page

    last_page = page_count(total_items, page.limit)
    if total_items > 0 and page.page > last_page:
        logger.info(
            "analytics.page_clamped",
            query=name,
            requested_page=page.page,
            last_page=last_page,
        )
        current_page = last_page
        (rows,) = await executor.gather(
            name,
            executor.fetch_all(
                window_statement(base, last_page, page.limit), f"{name}.window"
            ),
        )

    return rows, build_pagination_meta(total_items, current_page, page.limit)
