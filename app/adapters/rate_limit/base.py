"""Rate limiter interfaces.

The API depends on these abstractions (not the concrete implementations) so
the in-memory store can be swapped for a shared cache (e.g., Redis) when the
service runs as several instances, without touching the sliding-window logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitConfig:
    """Immutable configuration of one limiter instance.

    Attributes:
        max_requests: Requests allowed inside one window.
        window_ms: Window length in milliseconds.
        identifier: Namespace keeping otherwise identical keys apart across
            limiter instances (e.g., "auth" vs "realtime").
    """

    max_requests: int
    window_ms: int
    identifier: str = "default"

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")
        if not self.identifier:
            raise ValueError("identifier must be a non-empty string")


@dataclass(frozen=True)
class RequestRecord:
    """A counted hit at a point in time (epoch milliseconds)."""

    timestamp: int
    count: int = 1


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Requests left in the window (0 when blocked).
        reset: Epoch milliseconds at which capacity frees up.
        retry_after_seconds: Suggested wait in seconds when blocked, else None.
    """

    allowed: bool
    limit: int
    remaining: int
    reset: int
    retry_after_seconds: int | None = None


@dataclass(frozen=True)
class RateLimitStatus:
    """Read-only snapshot of a key's usage."""

    current_requests: int
    remaining: int
    reset: int


class AbstractRateLimitStore(ABC):
    """Storage for per-key request records.

    Keys are composite ``"{identifier}:{key}"`` strings. Records for a key are
    kept in chronological order.
    """

    @abstractmethod
    def get(self, key: str) -> list[RequestRecord]:
        """Return a copy of the records stored for ``key`` (empty if absent)."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, records: list[RequestRecord]) -> None:
        """Replace the records stored for ``key``."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; no-op when absent."""
        raise NotImplementedError

    @abstractmethod
    def sweep_expired(self, *, now_ms: int, max_age_ms: int) -> int:
        """Drop records older than ``max_age_ms`` and delete emptied keys.

        Returns:
            Number of keys deleted.
        """
        raise NotImplementedError


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, key: str) -> RateLimitResult:
        """Decide whether ``key`` may proceed, recording the hit if allowed."""
        raise NotImplementedError

    @abstractmethod
    def increment(self, key: str) -> None:
        """Record a hit for ``key`` without returning the decision."""
        raise NotImplementedError

    @abstractmethod
    def reset(self, key: str) -> None:
        """Forget every record stored for ``key``."""
        raise NotImplementedError

    @abstractmethod
    def get_status(self, key: str) -> RateLimitStatus:
        """Report usage for ``key`` without recording a hit."""
        raise NotImplementedError
