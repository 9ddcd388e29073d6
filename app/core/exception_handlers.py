"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- AppError subclasses → appropriate HTTP status (400, 401, 403, 404)
- PermissionDeniedAppError → generic "Access denied" body; the detailed
  message (role, action) only goes to the logs
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing
- Domain errors on requests the limiter admitted keep the X-RateLimit-* headers
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import (
    AccessDeniedAppError,
    AppError,
    AuthenticationAppError,
    NotFoundAppError,
    PermissionDeniedAppError,
    ValidationAppError,
)
from app.core.logging import get_request_id
from app.core.rate_limit import build_rate_limit_headers

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[AppError], int], ...] = (
    (ValidationAppError, 400),
    (AuthenticationAppError, 401),
    (AccessDeniedAppError, 403),
    (PermissionDeniedAppError, 403),
    (NotFoundAppError, 404),
)


def status_code_for(exc: AppError) -> int:
    """Map an AppError to its HTTP status code (400 when unmapped)."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


def _rate_limit_headers(request: Request) -> dict[str, str] | None:
    """Headers of the rate limit check that admitted this request, if any."""
    result = getattr(request.state, "rate_limit_result", None)
    if result is None or not settings.app.rate_limit_include_headers:
        return None
    return build_rate_limit_headers(result)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    All responses include:
    - error.code: Machine-readable error code
    - error.message: Human-readable message
    - error.request_id: For distributed tracing
    - error.details: Optional structured context (omitted for permission
      denials)

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code = status_code_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        }
    )

    if isinstance(exc, PermissionDeniedAppError):
        error_content = {
            "code": exc.code,
            "message": "Access denied",
            "request_id": get_request_id(),
        }
    else:
        error_content = {
            "code": exc.code,
            "message": exc.message,
            "request_id": get_request_id(),
        }
        if exc.details:
            error_content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
        headers=_rate_limit_headers(request),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic
    message. No stack traces reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Must be called during app initialization, before route registration.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
