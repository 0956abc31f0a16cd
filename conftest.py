"""Fixtures shared by the feature test packages.

Report services and routes are exercised against ``StubExecutor``, which
returns canned rows keyed by query name instead of touching PostgreSQL.
"""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import Select

from app.core.database import Database
from app.features.analytics.executor import QueryExecutor, get_executor
from app.main import app


class StubExecutor(QueryExecutor):
    """Executor answering each named query from ``results``.

    ``scalar`` and ``fetch_one`` go through ``fetch_all``, so a scalar result
    is registered as ``[(value,)]``. Unknown names return no rows.
    """

    def __init__(self) -> None:
        super().__init__(database=MagicMock(spec=Database), timeout_seconds=5.0)
        self.results: dict[str, list[Any]] = {}
        self.statements: dict[str, Select[Any]] = {}

    async def fetch_all(self, stmt: Select[Any], name: str) -> list[Any]:
        self.statements[name] = stmt
        return self.results.get(name, [])


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def stub_executor() -> StubExecutor:
    """Create an executor with no canned results."""
    return StubExecutor()


@pytest.fixture
async def api_client(stub_executor: StubExecutor) -> AsyncGenerator[AsyncClient, None]:
    """Create test client whose report routes use ``stub_executor``."""
    app.dependency_overrides[get_executor] = lambda: stub_executor

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
