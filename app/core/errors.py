"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    role: str
    permission: str
    action: str
    workspace_id: str
    component_id: str
    channel_name: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when the caller identity is missing or invalid."""


class AccessDeniedAppError(AppError):
    """Raised when the caller is not a member of the target workspace."""


class NotFoundAppError(AppError):
    """Raised when a referenced workspace or component does not exist."""


class PermissionDeniedAppError(AppError):
    """Raised when the caller's role lacks a permission.

    The message always starts with ``PERMISSION_DENIED`` and names the role,
    so callers and tests can match on it.
    """
