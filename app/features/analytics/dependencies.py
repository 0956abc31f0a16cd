"""Request parameter dependencies shared by the report routes.

All validation happens here, before any store access.
"""

from datetime import date

from fastapi import Query

from app.core.config import get_settings
from app.core.exceptions import BadRequestError
from app.features.analytics.filters import DateRange
from app.features.analytics.pagination import MAX_OFFSET, PageRequest


def _date_range(start_date: date | None, end_date: date | None) -> DateRange:
    try:
        return DateRange(start=start_date, end=end_date)
    except ValueError as e:
        raise BadRequestError(
            message=str(e),
            details={"startDate": str(start_date), "endDate": str(end_date)},
        ) from e


def get_date_range(
    start_date: date | None = Query(
        None,
        alias="startDate",
        description="First invoice day included (inclusive). Format: YYYY-MM-DD.",
    ),
    end_date: date | None = Query(
        None,
        alias="endDate",
        description="Last invoice day included (inclusive). Format: YYYY-MM-DD.",
    ),
) -> DateRange:
    """Optional date window; either bound may be omitted."""
    return _date_range(start_date, end_date)


def get_required_date_range(
    start_date: date | None = Query(
        None,
        alias="startDate",
        description="First invoice day included (required). Format: YYYY-MM-DD.",
    ),
    end_date: date | None = Query(
        None,
        alias="endDate",
        description="Last invoice day included (required). Format: YYYY-MM-DD.",
    ),
) -> DateRange:
    """Date window where both bounds are mandatory.

    Raises:
        BadRequestError: If either bound is missing.
    """
    if start_date is None or end_date is None:
        raise BadRequestError(message="startDate and endDate are required")
    return _date_range(start_date, end_date)


def get_page_request(
    page: int = Query(1, ge=1, description="Page number (1-indexed)."),
    limit: int | None = Query(
        None,
        ge=1,
        description="Items per page (default 10).",
    ),
) -> PageRequest:
    """Page controls with the configured default and ceiling.

    Raises:
        BadRequestError: If ``limit`` exceeds the configured maximum, or the
            page starts beyond the largest offset the store accepts.
    """
    settings = get_settings()
    size = limit if limit is not None else settings.analytics_default_page_size
    if size > settings.analytics_max_page_size:
        raise BadRequestError(
            message=f"limit must be <= {settings.analytics_max_page_size}",
            details={"limit": size},
        )
    if (page - 1) * size > MAX_OFFSET:
        raise BadRequestError(
            message=f"page must be <= {MAX_OFFSET // size + 1}",
            details={"page": page, "limit": size},
        )
    return PageRequest(page=page, limit=size)


def require_identifier(value: str, name: str) -> str:
    """Strip a path identifier and reject it if blank.

    Args:
        value: Raw path parameter.
        name: Parameter name for the error message.

    Returns:
        The stripped identifier.

    Raises:
        BadRequestError: If the identifier is empty.
    """
    identifier = value.strip()
    if not identifier:
        raise BadRequestError(message=f"{name} is required")
    return identifier
