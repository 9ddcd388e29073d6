"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports ``app.core.config``,
because settings are instantiated at import time.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("REALTIME_APP_ID", "123456")
os.environ.setdefault("REALTIME_APP_KEY", "test-app-key")
os.environ.setdefault("REALTIME_APP_SECRET", "test-app-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from app.adapters.membership.in_memory import InMemoryMembershipRepository
from app.adapters.realtime.in_process import InProcessRealtimeTransport


class FakeClock:
    """Deterministic clock returning UNIX seconds."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def time(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds

    def advance_ms(self, milliseconds: int) -> None:
        self.current += milliseconds / 1000


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryMembershipRepository:
    """Workspace ws-1 with one member per role and component cmp-1."""
    repo = InMemoryMembershipRepository()
    repo.add_workspace("ws-1", owner_id="alice")
    repo.add_member("ws-1", "bob", "editor")
    repo.add_member("ws-1", "carol", "viewer")
    repo.add_component("cmp-1", "ws-1")

    repo.add_workspace("ws-2", owner_id="dave")
    repo.add_component("cmp-2", "ws-2")
    return repo


@pytest.fixture
def transport() -> InProcessRealtimeTransport:
    return InProcessRealtimeTransport(app_key="test-app-key", app_secret="test-app-secret")
