"""Caller identity resolution.

Authentication itself happens upstream: the session provider (or the proxy in
front of this service) sets the authenticated user id in a trusted header.
This module only reads it.

Design principles:
- Single Responsibility: Only resolves the caller identity
- Dependency Injection: Used via FastAPI Depends() for loose coupling
- Configuration-driven: Header name managed via env vars, not hardcoded
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Depends, Request

from app.core.config import settings
from app.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


def hash_identifier(value: str) -> str:
    """Hash an identifier for logging without exposing it."""
    return hashlib.sha256(value.encode()).hexdigest()[:16]


def get_current_user_id(request: Request) -> str | None:
    """FastAPI dependency returning the authenticated user id, if any.

    Args:
        request: Incoming request.

    Returns:
        The trimmed user id from the configured header, or None.
    """
    raw = request.headers.get(settings.app.user_id_header)
    user_id = raw.strip() if raw else ""
    return user_id or None


def require_user(
    user_id: Annotated[str | None, Depends(get_current_user_id)],
) -> str:
    """FastAPI dependency requiring an authenticated user.

    Usage:
        @router.post("/protected")
        async def protected(user_id: Annotated[str, Depends(require_user)]):
            ...

    Raises:
        AuthenticationAppError: 401 when no user id was supplied.
    """
    if user_id is None:
        logger.warning("auth.missing_user", extra={"header": settings.app.user_id_header})
        raise AuthenticationAppError(
            code="unauthorized",
            message="Unauthorized",
            details={"hint": f"Authenticate upstream so {settings.app.user_id_header} is set"},
        )

    logger.debug("auth.success", extra={"user_hash": hash_identifier(user_id)})
    return user_id
