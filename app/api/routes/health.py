from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Health check endpoint.

    Used by load balancers and monitoring systems to determine service health.

    Returns:
        dict: ``status`` ("ok") and whether the rate limit sweeper is running.
    """

    sweeper = request.app.state.rate_limit_sweeper
    return {"status": "ok", "rate_limit_sweeper": "running" if sweeper.running else "stopped"}
