"""FastAPI dependency helpers for state built by the app factory."""
from __future__ import annotations

from typing import Callable

from fastapi import Request

from app.adapters.realtime.base import AbstractRealtimeTransport
from app.services.access_control import AccessControlService


def get_access_control(request: Request) -> AccessControlService:
    return request.app.state.access_control


def get_realtime_transport(request: Request) -> AbstractRealtimeTransport:
    return request.app.state.realtime_transport


def get_clock(request: Request) -> Callable[[], float]:
    """Time source (UNIX seconds) shared with the rate limiters."""
    return request.app.state.clock
