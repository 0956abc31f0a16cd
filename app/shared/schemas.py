"""Shared Pydantic schemas for API envelopes and pagination."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys.

    Fields are declared in snake_case; responses (FastAPI serializes by alias)
    use camelCase, matching the dashboard's JSON contract.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ErrorResponse(CamelModel):
    """Error envelope returned for every failed request."""

    error: str = Field(..., description="Human-readable, user-safe error message")
    code: str = Field(..., description="Machine-readable error code")
    request_id: str | None = Field(None, description="Request correlation ID")
    errors: list[dict[str, str]] | None = Field(
        None,
        description="Field-level validation errors (400 responses only)",
    )


class PaginationMeta(CamelModel):
    """Page metadata reported next to a windowed result."""

    total_items: int = Field(..., ge=0, description="Rows matching the filters, unwindowed")
    total_pages: int = Field(..., ge=0, description="ceil(totalItems / itemsPerPage)")
    current_page: int = Field(..., ge=1, description="Page actually returned (1-indexed)")
    items_per_page: int = Field(..., ge=1, description="Requested page size")


class DataResponse[T](CamelModel):
    """Success envelope for report endpoints."""

    data: T


class PaginatedResponse[T](CamelModel):
    """Success envelope for paginated list endpoints."""

    data: list[T] = Field(..., description="Rows of the current page")
    pagination: PaginationMeta
