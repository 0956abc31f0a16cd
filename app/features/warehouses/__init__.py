"""Warehouse reports: statistics and shipped line items."""

from app.features.warehouses.routes import router
from app.features.warehouses.service import WarehouseReportService

__all__ = ["WarehouseReportService", "router"]
