"""Movements report: grouped product flows between warehouses and cities."""

from app.features.movements.routes import router
from app.features.movements.service import MovementService

__all__ = ["MovementService", "router"]
