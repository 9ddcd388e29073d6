"""Sliding-window rate limiter.

The eligibility boundary (``now - window_ms``) moves continuously with the
clock: a burst that fills the budget at t0 frees capacity one record at a
time as each record ages out, never all at once at a bucket edge.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable

from app.adapters.rate_limit.base import (
    AbstractRateLimiter,
    AbstractRateLimitStore,
    RateLimitConfig,
    RateLimitResult,
    RateLimitStatus,
    RequestRecord,
)
from app.adapters.rate_limit.in_memory import InMemoryRateLimitStore


class SlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting timestamped records inside a moving window.

    Exhaustion is reported through ``RateLimitResult.allowed``; no operation
    raises. Several limiters can share one store, their keys are kept apart
    by the configured ``identifier`` namespace.

    Important:
        With the default in-memory store the limit is enforced per process.
    """

    def __init__(
        self,
        config: RateLimitConfig,
        *,
        store: AbstractRateLimitStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            config: Budget, window and namespace of this limiter.
            store: Record storage; a private in-memory store when omitted.
            clock: Time source returning UNIX time in seconds.
        """
        self._config = config
        self._store = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    @property
    def limit(self) -> int:
        return self._config.max_requests

    @property
    def window_ms(self) -> int:
        return self._config.window_ms

    @property
    def identifier(self) -> str:
        return self._config.identifier

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _store_key(self, key: str) -> str:
        return f"{self._config.identifier}:{key}"

    def _load_window(self, store_key: str, now: int) -> list[RequestRecord]:
        """Return the records still inside the window ending at ``now``."""
        window_start = now - self._config.window_ms
        return [r for r in self._store.get(store_key) if r.timestamp > window_start]

    def _reset_at(self, records: list[RequestRecord], now: int) -> int:
        if records:
            return records[0].timestamp + self._config.window_ms
        return now + self._config.window_ms

    def check(self, key: str) -> RateLimitResult:
        """Check ``key`` against the window and record the hit when allowed.

        Rejected attempts leave the store untouched, so they do not count
        toward future decisions.

        Args:
            key: Requester identifier (user id, IP address, ...). Any string,
                including the empty string, is a valid key.

        Returns:
            RateLimitResult with the decision and header metadata.
        """
        store_key = self._store_key(key)

        with self._lock:
            now = self._now_ms()
            records = self._load_window(store_key, now)
            total = sum(r.count for r in records)

            if total >= self._config.max_requests:
                reset = self._reset_at(records, now)
                retry_after = max(0, math.ceil((reset - now) / 1000))
                return RateLimitResult(
                    allowed=False,
                    limit=self._config.max_requests,
                    remaining=0,
                    reset=reset,
                    retry_after_seconds=retry_after,
                )

            records.append(RequestRecord(timestamp=now, count=1))
            self._store.set(store_key, records)

        return RateLimitResult(
            allowed=True,
            limit=self._config.max_requests,
            remaining=max(0, self._config.max_requests - (total + 1)),
            reset=now + self._config.window_ms,
        )

    def increment(self, key: str) -> None:
        self.check(key)

    def reset(self, key: str) -> None:
        with self._lock:
            self._store.delete(self._store_key(key))

    def get_status(self, key: str) -> RateLimitStatus:
        """Report current usage of ``key`` without recording a hit."""
        now = self._now_ms()
        records = self._load_window(self._store_key(key), now)
        total = sum(r.count for r in records)
        return RateLimitStatus(
            current_requests=total,
            remaining=max(0, self._config.max_requests - total),
            reset=self._reset_at(records, now),
        )
