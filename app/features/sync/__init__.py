"""Order ingestion from the VTEX Order Management System."""

from app.features.sync.client import VtexClient
from app.features.sync.routes import router
from app.features.sync.service import OrderUpserter, SyncResult, SyncService

__all__ = ["OrderUpserter", "SyncResult", "SyncService", "VtexClient", "router"]
