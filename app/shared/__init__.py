"""Shared utilities used across 3+ features."""

from app.shared.models import IngestedAtMixin
from app.shared.schemas import (
    CamelModel,
    DataResponse,
    ErrorResponse,
    PaginatedResponse,
    PaginationMeta,
)

__all__ = [
    "CamelModel",
    "DataResponse",
    "ErrorResponse",
    "IngestedAtMixin",
    "PaginatedResponse",
    "PaginationMeta",
]
