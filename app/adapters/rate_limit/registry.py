"""Named, preconfigured limiters sharing one store.

The registry is built once per application and handed to the HTTP layer
through ``app.state``; there are no module-level limiter singletons.
"""

from __future__ import annotations

import time
from typing import Callable, Iterator, Mapping

from app.adapters.rate_limit.base import AbstractRateLimitStore, RateLimitConfig
from app.adapters.rate_limit.in_memory import InMemoryRateLimitStore
from app.adapters.rate_limit.sliding_window import SlidingWindowRateLimiter
from app.core.config import AppSettings

AUTH = "auth"
REALTIME = "realtime"
API = "api"
EXPENSIVE = "expensive"


class RateLimiterRegistry:
    """Lookup of limiters by name, all backed by the same store."""

    def __init__(
        self,
        configs: Mapping[str, RateLimitConfig],
        *,
        store: AbstractRateLimitStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        identifiers = [c.identifier for c in configs.values()]
        if len(set(identifiers)) != len(identifiers):
            raise ValueError("limiter identifiers must be unique")

        self.store = store if store is not None else InMemoryRateLimitStore()
        self._limiters = {
            name: SlidingWindowRateLimiter(config, store=self.store, clock=clock)
            for name, config in configs.items()
        }

    def __iter__(self) -> Iterator[str]:
        return iter(self._limiters)

    def __len__(self) -> int:
        return len(self._limiters)

    def get(self, name: str) -> SlidingWindowRateLimiter:
        """Return the limiter registered as ``name``.

        Raises:
            KeyError: If no limiter has that name.
        """
        try:
            return self._limiters[name]
        except KeyError:
            raise KeyError(f"Unknown rate limiter: {name!r}") from None

    @property
    def auth(self) -> SlidingWindowRateLimiter:
        return self.get(AUTH)

    @property
    def realtime(self) -> SlidingWindowRateLimiter:
        return self.get(REALTIME)

    @property
    def api(self) -> SlidingWindowRateLimiter:
        return self.get(API)

    @property
    def expensive(self) -> SlidingWindowRateLimiter:
        return self.get(EXPENSIVE)

    def longest_window_ms(self) -> int:
        return max((limiter.window_ms for limiter in self._limiters.values()), default=0)


def default_limiter_configs(app_settings: AppSettings) -> dict[str, RateLimitConfig]:
    """Build the preset limiter configs from settings.

    Defaults: auth 5/min, realtime 60/min, api 100/min, expensive 10/min.
    """

    return {
        AUTH: RateLimitConfig(
            max_requests=app_settings.rate_limit_auth_requests,
            window_ms=app_settings.rate_limit_auth_window_ms,
            identifier=AUTH,
        ),
        REALTIME: RateLimitConfig(
            max_requests=app_settings.rate_limit_realtime_requests,
            window_ms=app_settings.rate_limit_realtime_window_ms,
            identifier=REALTIME,
        ),
        API: RateLimitConfig(
            max_requests=app_settings.rate_limit_api_requests,
            window_ms=app_settings.rate_limit_api_window_ms,
            identifier=API,
        ),
        EXPENSIVE: RateLimitConfig(
            max_requests=app_settings.rate_limit_expensive_requests,
            window_ms=app_settings.rate_limit_expensive_window_ms,
            identifier=EXPENSIVE,
        ),
    }


def build_rate_limiters(
    app_settings: AppSettings,
    *,
    store: AbstractRateLimitStore | None = None,
    clock: Callable[[], float] = time.time,
) -> RateLimiterRegistry:
    return RateLimiterRegistry(default_limiter_configs(app_settings), store=store, clock=clock)
