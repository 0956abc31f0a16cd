"""Global dashboard: headline totals, top lists and monthly trend."""

from app.features.dashboard.routes import router
from app.features.dashboard.schemas import DashboardData
from app.features.dashboard.service import DashboardService

__all__ = ["DashboardData", "DashboardService", "router"]
