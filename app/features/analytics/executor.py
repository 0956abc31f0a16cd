"""Concurrent, deadline-bound execution of read-only report queries."""

import asyncio
from collections.abc import Coroutine, Sequence
from typing import Any

from fastapi import Depends
from sqlalchemy import Row, Select
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import Database, get_database
from app.core.exceptions import DatabaseError, QueryTimeoutError
from app.core.logging import get_logger

logger = get_logger(__name__)


class QueryExecutor:
    """Runs report statements against the fact store.

    Each statement gets its own pooled session, so the independent aggregates
    of one report can be awaited together with ``gather``. Store failures are
    logged with the statement name and re-raised as ``DatabaseError``, whose
    message carries no SQL or driver text.
    """

    def __init__(self, database: Database, timeout_seconds: float) -> None:
        self.database = database
        self.timeout_seconds = timeout_seconds

    async def fetch_all(self, stmt: Select[Any], name: str) -> Sequence[Row[Any]]:
        """Execute a statement and return every row.

        Args:
            stmt: Statement to execute.
            name: Query name for logging.

        Returns:
            Result rows.

        Raises:
            DatabaseError: If the query or the connection fails.
        """
        try:
            async with self.database.session() as session:
                result = await session.execute(stmt)
                return result.all()
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "analytics.query_failed",
                query=name,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise DatabaseError(
                message="Failed to compute report",
                details={"query": name, "error_type": type(e).__name__},
            ) from e

    async def fetch_one(self, stmt: Select[Any], name: str) -> Row[Any] | None:
        """Execute a statement and return its first row, if any."""
        rows = await self.fetch_all(stmt, name)
        return rows[0] if rows else None

    async def scalar(self, stmt: Select[Any], name: str) -> Any:
        """Execute a statement and return the first column of its first row."""
        row = await self.fetch_one(stmt, name)
        return row[0] if row is not None else None

    async def gather(self, report: str, *aws: Coroutine[Any, Any, Any]) -> list[Any]:
        """Await independent queries together under the request deadline.

        The first failure cancels the sibling queries, which releases their
        sessions, and fails the whole report; no partial results.

        Args:
            report: Report name for logging.
            *aws: Query coroutines.

        Returns:
            Results in argument order.

        Raises:
            QueryTimeoutError: If the deadline expires first.
            FulfillmentStatsError: The first error raised by a query.
        """
        try:
            async with asyncio.timeout(self.timeout_seconds):
                async with asyncio.TaskGroup() as group:
                    tasks = [group.create_task(aw) for aw in aws]
        except TimeoutError as e:
            logger.error(
                "analytics.report_timed_out",
                report=report,
                timeout_seconds=self.timeout_seconds,
            )
            raise QueryTimeoutError(
                details={"report": report, "timeout_seconds": self.timeout_seconds}
            ) from e
        except ExceptionGroup as group_error:
            error, *others = group_error.exceptions
            for other in others:
                logger.warning(
                    "analytics.sibling_query_failed",
                    report=report,
                    error_type=type(other).__name__,
                )
            raise error from error.__cause__
        return [task.result() for task in tasks]


def get_executor(database: Database = Depends(get_database)) -> QueryExecutor:
    """Dependency building a request-scoped executor."""
    settings = get_settings()
    return QueryExecutor(database, settings.analytics_query_timeout_seconds)
