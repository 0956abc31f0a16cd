"""Tests for the report query executor."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.core.database import Database
from app.core.exceptions import DatabaseError, QueryTimeoutError
from app.features.analytics.executor import QueryExecutor
from app.features.data_platform.models import Order

STMT = select(Order.order_id)


def _database(session: MagicMock) -> MagicMock:
    @asynccontextmanager
    async def open_session() -> AsyncIterator[MagicMock]:
        yield session

    database = MagicMock(spec=Database)
    database.session = open_session
    return database


class TestFetch:
    """Tests for fetch_all, fetch_one and scalar."""

    async def test_fetch_all_returns_rows(self):
        """Rows of the result should be returned as-is."""
        session = MagicMock()
        session.execute = AsyncMock(return_value=MagicMock(all=MagicMock(return_value=[(1,), (2,)])))
        executor = QueryExecutor(_database(session), timeout_seconds=5)

        assert await executor.fetch_all(STMT, "q") == [(1,), (2,)]
        assert await executor.fetch_one(STMT, "q") == (1,)
        assert await executor.scalar(STMT, "q") == 1

    async def test_scalar_without_rows(self):
        """No rows should mean a None scalar."""
        session = MagicMock()
        session.execute = AsyncMock(return_value=MagicMock(all=MagicMock(return_value=[])))
        executor = QueryExecutor(_database(session), timeout_seconds=5)

        assert await executor.fetch_one(STMT, "q") is None
        assert await executor.scalar(STMT, "q") is None

    async def test_store_failure_becomes_database_error(self):
        """Driver errors should surface as DatabaseError without SQL text."""
        session = MagicMock()
        session.execute = AsyncMock(
            side_effect=OperationalError("SELECT secret", {}, Exception("refused"))
        )
        executor = QueryExecutor(_database(session), timeout_seconds=5)

        with pytest.raises(DatabaseError) as exc_info:
            await executor.fetch_all(STMT, "dashboard.summary")

        assert exc_info.value.message == "Failed to compute report"
        assert exc_info.value.details["query"] == "dashboard.summary"
        assert "secret" not in exc_info.value.message


class TestGather:
    """Tests for gather."""

    async def test_results_in_argument_order(self):
        """Results should follow the order of the awaitables."""
        executor = QueryExecutor(MagicMock(spec=Database), timeout_seconds=5)

        async def value(v: int, delay: float) -> int:
            await asyncio.sleep(delay)
            return v

        assert await executor.gather("r", value(1, 0.02), value(2, 0.0)) == [1, 2]

    async def test_deadline(self):
        """A report slower than the deadline should raise QueryTimeoutError."""
        executor = QueryExecutor(MagicMock(spec=Database), timeout_seconds=0.01)

        with pytest.raises(QueryTimeoutError) as exc_info:
            await executor.gather("slow", asyncio.sleep(1))

        assert exc_info.value.status_code == 504
        assert exc_info.value.details["report"] == "slow"

    async def test_first_failure_fails_report(self):
        """Any failing query should fail the whole report."""
        executor = QueryExecutor(MagicMock(spec=Database), timeout_seconds=5)

        async def fail() -> None:
            raise DatabaseError()

        with pytest.raises(DatabaseError):
            await executor.gather("r", asyncio.sleep(0, result=1), fail())

    async def test_failure_cancels_sibling_queries(self):
        """A failing query should cancel the queries still running beside it."""
        executor = QueryExecutor(MagicMock(spec=Database), timeout_seconds=5)
        sibling = {"cancelled": False, "finished": False}

        async def fail() -> None:
            await asyncio.sleep(0.01)
            raise DatabaseError(details={"query": "dashboard.summary"})

        async def slow() -> int:
            try:
                await asyncio.sleep(0.2)
            except asyncio.CancelledError:
                sibling["cancelled"] = True
                raise
            sibling["finished"] = True
            return 1

        with pytest.raises(DatabaseError) as exc_info:
            await executor.gather("dashboard", fail(), slow())

        assert exc_info.value.details == {"query": "dashboard.summary"}
        assert sibling == {"cancelled": True, "finished": False}

    async def test_failure_keeps_store_cause(self):
        """The unwrapped error should still chain to the driver error."""
        session = MagicMock()
        session.execute = AsyncMock(
            side_effect=OperationalError("SELECT 1", {}, Exception("refused"))
        )
        executor = QueryExecutor(_database(session), timeout_seconds=5)

        with pytest.raises(DatabaseError) as exc_info:
            await executor.gather("r", executor.fetch_all(STMT, "r.rows"))

        assert isinstance(exc_info.value.__cause__, OperationalError)
