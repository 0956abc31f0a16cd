"""Fixtures for the end-to-end report tests.

These tests run the real application against PostgreSQL (docker-compose up -d,
then ``alembic upgrade head``). Every seeded row uses the ``TEST-`` prefix and
invoice dates in 1990 so reports over that window see only seeded data.
"""

from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete

from app.core.database import Database
from app.features.data_platform.models import (
    Destination,
    Order,
    OrderItem,
    Product,
    Warehouse,
)
from app.main import app

# order_id, invoiced_date, product, warehouse, destination index, quantity, unit price
SEED_LINES = [
    ("TEST-O1", datetime(1990, 1, 10, 9, 0), "TEST-P1", "TEST-W1", 0, 2, 1000),
    ("TEST-O2", datetime(1990, 1, 20, 9, 0), "TEST-P1", "TEST-W1", 1, 1, 1000),
    ("TEST-O3", datetime(1990, 2, 5, 9, 0), "TEST-P2", "TEST-W2", 0, 3, 500),
    ("TEST-O4", datetime(1990, 2, 15, 9, 0), "TEST-P3", "TEST-W1", 0, 1, 200),
    ("TEST-O5", datetime(1990, 3, 1, 9, 0), "TEST-P1", "TEST-W2", 1, 4, 1000),
    ("TEST-O6", datetime(1990, 3, 9, 9, 0), "TEST-P2", "TEST-W1", None, 1, 500),
]


async def _cleanup(database: Database) -> None:
    async with database.session() as session, session.begin():
        await session.execute(delete(OrderItem).where(OrderItem.order_id.like("TEST-%")))
        await session.execute(delete(Order).where(Order.order_id.like("TEST-%")))
        await session.execute(delete(Product).where(Product.product_id.like("TEST-%")))
        await session.execute(delete(Warehouse).where(Warehouse.warehouse_id.like("TEST-%")))
        await session.execute(delete(Destination).where(Destination.city.like("TEST%")))


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Real store handle, cleaned of seeded rows before and after each test."""
    db = Database()
    await _cleanup(db)
    yield db
    await _cleanup(db)
    await db.dispose()


@pytest.fixture
async def seeded(database: Database) -> Database:
    """Seed six single-line orders across three products and two cities."""
    async with database.session() as session, session.begin():
        session.add_all(
            [
                Product(product_id="TEST-P1", name="Desk Lamp", category_name="Home"),
                Product(product_id="TEST-P2", name="Hose", category_name="Garden"),
                Product(product_id="TEST-P3", name="Gift Card", category_name=None),
                Warehouse(warehouse_id="TEST-W1", warehouse_name="North DC"),
                Warehouse(warehouse_id="TEST-W2", warehouse_name="South DC"),
            ]
        )
        destinations = [
            Destination(city="TEST-Cali", state="VAC", country="COL"),
            Destination(city="TEST Cáli, Valle", state="VAC", country="COL"),
        ]
        session.add_all(destinations)
        await session.flush()

        for order_id, invoiced, product_id, warehouse_id, dest, qty, price in SEED_LINES:
            session.add(
                Order(
                    order_id=order_id,
                    invoiced_date=invoiced,
                    total_value=qty * price,
                    currency_code="COP",
                    status="invoiced",
                )
            )
            session.add(
                OrderItem(
                    order_id=order_id,
                    product_id=product_id,
                    warehouse_id=warehouse_id,
                    destination_id=destinations[dest].destination_id if dest is not None else None,
                    quantity=qty,
                    unit_price=price,
                )
            )
    return database


@pytest.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the application with a real store."""
    app.state.database = database
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    del app.state.database
