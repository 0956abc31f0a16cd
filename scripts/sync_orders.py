#!/usr/bin/env python
"""Order sync CLI - ingest invoiced VTEX orders without the API.

Usage:
    # Sync the configured look-back window ending today
    uv run python scripts/sync_orders.py

    # Sync an explicit window
    uv run python scripts/sync_orders.py --start-date 2024-01-01 --end-date 2024-01-31
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date

from app.core.config import get_settings
from app.core.database import Database
from app.core.exceptions import FulfillmentStatsError
from app.core.logging import configure_logging
from app.features.sync.service import SyncService, default_window


def parse_date(date_str: str) -> date:
    """Parse date string in YYYY-MM-DD format.

    Raises:
        argparse.ArgumentTypeError: If date format is invalid.
    """
    try:
        return date.fromisoformat(date_str)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date format: {date_str}. Use YYYY-MM-DD") from e


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Ingest invoiced orders from the VTEX OMS into the fact store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Last VTEX_SYNC_LOOKBACK_DAYS days
  sync_orders.py

  # One month
  sync_orders.py --start-date 2024-01-01 --end-date 2024-01-31
        """,
    )
    parser.add_argument(
        "--start-date",
        type=parse_date,
        help="First invoice day (default: start of the look-back window)",
    )
    parser.add_argument(
        "--end-date",
        type=parse_date,
        help="Last invoice day (default: today, UTC)",
    )
    return parser


async def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    settings = get_settings()
    configure_logging()

    if not settings.vtex_api_url:
        print("ERROR: VTEX_API_URL is not set.")
        return 1

    start, end = default_window(settings)
    start = args.start_date or start
    end = args.end_date or end
    if start > end:
        print("ERROR: --start-date must be on or before --end-date.")
        return 1

    database = Database(settings)
    try:
        result = await SyncService(database, settings=settings).run(start, end)
    except FulfillmentStatsError as e:
        print(f"[FAIL] {e.message}")
        return 1
    finally:
        await database.dispose()

    print(f"Synced {result.total_orders} orders ({result.failed_orders} failed)")
    print(f"Window: {start} .. {end}, {result.duration_ms:.0f} ms")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
