#!/usr/bin/env python
"""Check database connectivity and the fact store schema.

Usage:
    uv run python scripts/check_db.py
"""

import asyncio
import sys

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import Database
from app.features.data_platform.models import (
    Destination,
    Order,
    OrderItem,
    Product,
    Warehouse,
)

TABLES = (Order, Product, Warehouse, Destination, OrderItem)


async def check_database() -> int:
    """Verify connectivity and report row counts of the fact store."""
    settings = get_settings()

    print("FulfillmentStats - Database Connectivity Check")
    print("=" * 46)
    print(f"Database URL: {settings.database_url.split('@')[-1]}")  # Hide credentials
    print()

    database = Database(settings)

    try:
        async with database.session() as session:
            result = await session.execute(text("SELECT version()"))
            version = result.scalar() or ""
            print(f"[OK] PostgreSQL version: {version[:50]}...")

            for model in TABLES:
                count = await session.scalar(select(func.count()).select_from(model))
                print(f"[OK] {model.__tablename__}: {count} rows")

        print()
        print("Database check completed successfully!")
        return 0

    except (SQLAlchemyError, OSError) as e:
        print(f"[FAIL] Check failed: {e}")
        print()
        print("Troubleshooting:")
        print("  1. Ensure Docker is running: docker-compose up -d")
        print("  2. Check DATABASE_URL in .env file")
        print("  3. Apply migrations: uv run alembic upgrade head")
        return 1

    finally:
        await database.dispose()


def main() -> None:
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()
