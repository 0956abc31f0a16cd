"""Destination-city reports: statistics and serving warehouses."""

from app.features.destinations.routes import router
from app.features.destinations.service import CityReportService

__all__ = ["CityReportService", "router"]
