"""Fixtures for data platform integration tests.

Note: The db_session fixture lives here because tests in app/features/*/tests/
cannot see fixtures in tests/conftest.py, which is not in their parent path.
"""

from datetime import datetime

import pytest
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.features.data_platform.models import (
    Destination,
    Order,
    OrderItem,
    Product,
    Warehouse,
)

TEST_PREFIX = "TEST-"


@pytest.fixture
async def db_session():
    """Create async database session for integration tests.

    Uses existing tables from migrations. Cleans up test data after each test.
    Requires PostgreSQL to be running (docker-compose up -d) and migrations applied.
    """
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with async_session_maker() as cleanup_session:
        # Delete in FK order
        await cleanup_session.execute(
            delete(OrderItem).where(OrderItem.order_id.like(f"{TEST_PREFIX}%"))
        )
        await cleanup_session.execute(delete(Order).where(Order.order_id.like(f"{TEST_PREFIX}%")))
        await cleanup_session.execute(
            delete(Product).where(Product.product_id.like(f"{TEST_PREFIX}%"))
        )
        await cleanup_session.execute(
            delete(Warehouse).where(Warehouse.warehouse_id.like(f"{TEST_PREFIX}%"))
        )
        await cleanup_session.execute(
            delete(Destination).where(Destination.city.like(f"{TEST_PREFIX}%"))
        )
        try:
            await cleanup_session.commit()
        except SQLAlchemyError:
            # Next run cleans up again
            await cleanup_session.rollback()

    await engine.dispose()


@pytest.fixture
async def sample_order(db_session: AsyncSession) -> Order:
    """Create a sample invoiced order."""
    order = Order(
        order_id="TEST-1001-01",
        invoiced_date=datetime(2024, 1, 15, 10, 30),
        total_value=3000,
        currency_code="COP",
        status="invoiced",
    )
    db_session.add(order)
    await db_session.commit()
    return order


@pytest.fixture
async def sample_product(db_session: AsyncSession) -> Product:
    """Create a sample product."""
    product = Product(
        product_id="TEST-SKU-1",
        name="Desk Lamp",
        brand_name="Lumen",
        category_id="10",
        category_name="Home",
    )
    db_session.add(product)
    await db_session.commit()
    return product


@pytest.fixture
async def sample_warehouse(db_session: AsyncSession) -> Warehouse:
    """Create a sample warehouse."""
    warehouse = Warehouse(
        warehouse_id="TEST-WH-1",
        warehouse_name="Main DC",
        address_city="Bogotá",
        address_country="COL",
    )
    db_session.add(warehouse)
    await db_session.commit()
    return warehouse


@pytest.fixture
async def sample_destination(db_session: AsyncSession) -> Destination:
    """Create a sample destination."""
    destination = Destination(city="TEST-Bogotá", state="DC", country="COL")
    db_session.add(destination)
    await db_session.commit()
    await db_session.refresh(destination)
    return destination
