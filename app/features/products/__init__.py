"""Per-product reports: distribution statistics and destinations."""

from app.features.products.routes import router
from app.features.products.service import ProductReportService

__all__ = ["ProductReportService", "router"]
