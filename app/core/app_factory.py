"""Application factory for FastAPI app.

Builds the process-wide state (limiter registry and its store, background
sweeper, access control, realtime transport), puts it on ``app.state`` and
ties the sweeper to the application lifespan.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI

from app.adapters.membership.base import AbstractMembershipRepository
from app.adapters.membership.in_memory import InMemoryMembershipRepository
from app.adapters.rate_limit.base import AbstractRateLimitStore
from app.adapters.rate_limit.registry import build_rate_limiters
from app.adapters.rate_limit.sweeper import StoreSweeper
from app.adapters.realtime.base import AbstractRealtimeTransport
from app.adapters.realtime.factory import create_realtime_transport
from app.api.routes import health_router, realtime_router, workspaces_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.services.access_control import AccessControlService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the rate limit store sweeper on startup, stop it on shutdown."""
    sweeper: StoreSweeper = app.state.rate_limit_sweeper
    await sweeper.start()
    try:
        yield
    finally:
        await sweeper.stop()


def create_app(
    *,
    membership_repository: AbstractMembershipRepository | None = None,
    realtime_transport: AbstractRealtimeTransport | None = None,
    rate_limit_store: AbstractRateLimitStore | None = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        membership_repository: Membership lookup; in-memory when omitted.
        realtime_transport: Pub/sub transport; built from settings when omitted.
        rate_limit_store: Store shared by all limiters; in-memory when omitted.
        clock: Time source for the limiters and the sweeper (UNIX seconds).

    Returns:
        Configured FastAPI app with state, middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Workspace Access API",
        description=(
            "Rate-limited realtime proxy and role-based permission checks for "
            "collaborative component workspaces."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
    )

    app.state.clock = clock
    limiters = build_rate_limiters(settings.app, store=rate_limit_store, clock=clock)
    app.state.rate_limiters = limiters
    app.state.rate_limit_sweeper = StoreSweeper(
        limiters.store,
        interval_seconds=settings.app.rate_limit_cleanup_interval_seconds,
        max_age_seconds=settings.app.rate_limit_cleanup_max_age_seconds,
        min_age_ms=limiters.longest_window_ms(),
        clock=clock,
    )
    app.state.access_control = AccessControlService(
        membership_repository or InMemoryMembershipRepository()
    )
    app.state.realtime_transport = realtime_transport or create_realtime_transport()

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(realtime_router, prefix="/v1")
    app.include_router(workspaces_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    logger.info(
        "app.created",
        extra={"limiters": list(limiters), "rate_limit_enabled": settings.app.rate_limit_enabled},
    )
    return app
