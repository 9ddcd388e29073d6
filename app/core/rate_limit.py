"""Rate limiting dependency for FastAPI routes.

This module wires the named sliding-window limiters into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Injected state: limiters live on ``app.state.rate_limiters`` (built by the
  app factory), never in module globals.
- Header contract: accepted responses carry the live ``X-RateLimit-*``
  values; rejections are 429 with ``Retry-After`` as well.

Requester key: authenticated user id, else the client IP taken from CDN/proxy
headers, else "unknown".
"""

from __future__ import annotations

import logging
from typing import Annotated, Awaitable, Callable

from fastapi import Depends, HTTPException, Request, Response, status

from app.adapters.rate_limit.base import RateLimitResult
from app.adapters.rate_limit.registry import RateLimiterRegistry
from app.core.auth import get_current_user_id, hash_identifier
from app.core.config import settings

logger = logging.getLogger(__name__)


def get_rate_limiters(request: Request) -> RateLimiterRegistry:
    """Return the limiter registry attached to the running application."""
    return request.app.state.rate_limiters


def get_request_identifier(request: Request, user_id: str | None = None) -> str:
    """Build the limiter key for the current request.

    Priority: user id, ``cf-connecting-ip``, ``x-real-ip``, first entry of
    ``x-forwarded-for``, then the literal "unknown".

    None of these headers is verified here. A client that can set the user id
    header gets a fresh budget per value, so the edge proxy must strip or
    overwrite it (and the IP headers) before requests reach this service.

    Args:
        request: FastAPI request.
        user_id: Authenticated user id, if any.

    Returns:
        str: Limiter key.
    """
    if user_id:
        return user_id

    headers = request.headers
    forwarded = headers.get("x-forwarded-for")
    forwarded_first = forwarded.split(",")[0].strip() if forwarded else ""

    return (
        headers.get("cf-connecting-ip")
        or headers.get("x-real-ip")
        or forwarded_first
        or "unknown"
    )


def build_rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Render the ``X-RateLimit-*`` (and, when blocked, ``Retry-After``) headers."""
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset),
    }
    if not result.allowed:
        headers["Retry-After"] = str(result.retry_after_seconds or 0)
    return headers


def enforce_rate_limit(name: str) -> Callable[..., Awaitable[None]]:
    """Create a dependency that consumes budget from the limiter ``name``.

    Usage:
        @router.post("/realtime/auth", dependencies=[Depends(enforce_rate_limit("realtime"))])

    Args:
        name: Registered limiter name (auth, realtime, api, expensive).

    Returns:
        Async FastAPI dependency raising HTTP 429 when the budget is exhausted.
    """

    async def _enforce(
        request: Request,
        response: Response,
        limiters: Annotated[RateLimiterRegistry, Depends(get_rate_limiters)],
        user_id: Annotated[str | None, Depends(get_current_user_id)],
    ) -> None:
        if not settings.app.rate_limit_enabled:
            return

        limiter = limiters.get(name)
        identifier = get_request_identifier(request, user_id)
        key_type = "user" if user_id else "ip"

        result = limiter.check(identifier)
        log_extra = {
            "limiter": name,
            "key_type": key_type,
            "key_hash": hash_identifier(identifier),
            "limit": result.limit,
            "remaining": result.remaining,
            "window_ms": limiter.window_ms,
        }

        if result.allowed:
            logger.info("rate_limit.allowed", extra=log_extra)
            # Error handlers build fresh responses and re-attach these headers
            request.state.rate_limit_result = result
            if settings.app.rate_limit_include_headers:
                response.headers.update(build_rate_limit_headers(result))
            return

        logger.warning(
            "rate_limit.exceeded",
            extra={**log_extra, "retry_after_s": result.retry_after_seconds},
        )

        headers = build_rate_limit_headers(result) if settings.app.rate_limit_include_headers else None
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "Too many requests",
                "retryAfter": result.retry_after_seconds,
            },
            headers=headers,
        )

    _enforce.__name__ = f"enforce_rate_limit_{name}"
    return _enforce
