"""Custom exceptions and FastAPI exception handlers.

Every failure leaves the API as the error envelope
``{"error": <message>, "code": ..., "requestId": ...}``. Store and driver
details are logged, never returned to the caller.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging import get_logger, request_id_ctx
from app.shared.schemas import ErrorResponse

logger = get_logger(__name__)


# =============================================================================
# Exception Classes
# =============================================================================


class FulfillmentStatsError(Exception):
    """Base exception for application errors.

    All application-specific exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application error.

        Args:
            message: Human-readable error message (safe to return to callers).
            code: Machine-readable error code.
            status_code: HTTP status code.
            details: Additional error context (logged only).
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class BadRequestError(FulfillmentStatsError):
    """Missing or malformed request parameter.

    Raised before any store access is attempted.
    """

    def __init__(
        self,
        message: str = "Bad request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=400,
            details=details,
        )


class DatabaseError(FulfillmentStatsError):
    """Query or connectivity failure against the fact store."""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="DATABASE_ERROR",
            status_code=500,
            details=details,
        )


class QueryTimeoutError(FulfillmentStatsError):
    """A report did not finish within the per-request deadline."""

    def __init__(
        self,
        message: str = "Report query exceeded the request deadline",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="QUERY_TIMEOUT",
            status_code=504,
            details=details,
        )


class UpstreamError(FulfillmentStatsError):
    """The external commerce platform returned an unusable response."""

    def __init__(
        self,
        message: str = "Upstream commerce platform request failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="UPSTREAM_ERROR",
            status_code=502,
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================


def error_response(
    status: int,
    message: str,
    code: str,
    errors: list[dict[str, str]] | None = None,
) -> JSONResponse:
    """Build the JSON error envelope.

    Args:
        status: HTTP status code.
        message: User-safe error message.
        code: Machine-readable error code.
        errors: Field-level validation errors (optional).

    Returns:
        JSONResponse carrying an ``ErrorResponse`` body.
    """
    body = ErrorResponse(
        error=message,
        code=code,
        request_id=request_id_ctx.get(),
        errors=errors,
    )
    return JSONResponse(
        status_code=status,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def app_exception_handler(
    request: Request,
    exc: FulfillmentStatsError,
) -> JSONResponse:
    """Handle application errors.

    Args:
        request: FastAPI request object.
        exc: The raised exception.

    Returns:
        Error envelope with the exception's status code.
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "app.error_handled",
        error=exc.message,
        error_type=type(exc).__name__,
        error_code=exc.code,
        status_code=exc.status_code,
        path=str(request.url.path),
        details=exc.details,
        exc_info=exc.status_code >= 500,
    )

    return error_response(status=exc.status_code, message=exc.message, code=exc.code)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Turn query/path validation failures into a 400 envelope.

    Args:
        request: FastAPI request object.
        exc: Pydantic validation error.

    Returns:
        Error envelope listing the offending parameters.
    """
    field_errors: list[dict[str, str]] = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field_path = ".".join(str(part) for part in loc if part not in ("body", "query", "path"))
        field_errors.append(
            {
                "field": field_path,
                "message": str(error.get("msg", "Validation failed")),
            }
        )

    logger.warning(
        "app.validation_error",
        error_count=len(field_errors),
        path=str(request.url.path),
        fields=[e["field"] for e in field_errors],
    )

    fields = ", ".join(e["field"] for e in field_errors)
    return error_response(
        status=400,
        message=f"Invalid or missing parameters: {fields}",
        code="VALIDATION_ERROR",
        errors=field_errors,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions with a generic 500 envelope.

    Args:
        request: FastAPI request object.
        exc: The raised exception.

    Returns:
        Generic error envelope.
    """
    logger.error(
        "app.unhandled_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=str(request.url.path),
        exc_info=True,
    )

    return error_response(
        status=500,
        message="An unexpected error occurred",
        code="INTERNAL_ERROR",
    )


# =============================================================================
# Handler Registration
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(FulfillmentStatsError, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
