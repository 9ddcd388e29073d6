"""Background sweep of the rate limit store.

Per-call eviction only touches keys that are checked again. Keys seen once
(e.g., an IP that never comes back) would stay forever, so a periodic task
drops keys whose records are all older than the configured max age.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimitStore

logger = logging.getLogger(__name__)


class StoreSweeper:
    """Periodically calls ``sweep_expired`` on a store from an asyncio task.

    The max age is never shorter than ``min_age_ms`` (the longest limiter
    window), so a sweep cannot drop a record a limiter still counts.
    """

    def __init__(
        self,
        store: AbstractRateLimitStore,
        *,
        interval_seconds: float = 300.0,
        max_age_seconds: int = 3600,
        min_age_ms: int = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._store = store
        self._interval = interval_seconds
        self._max_age_ms = max(max_age_seconds * 1000, min_age_ms)
        self._clock = clock
        self._task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None

    @property
    def max_age_ms(self) -> int:
        return self._max_age_ms

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> int:
        """Sweep the store now.

        Returns:
            Number of keys deleted.
        """
        now_ms = int(self._clock() * 1000)
        return self._store.sweep_expired(now_ms=now_ms, max_age_ms=self._max_age_ms)

    async def start(self) -> None:
        """Start the background sweep task (no-op when already running)."""
        if self._task is not None:
            logger.debug("rate_limit_sweeper.already_running")
            return

        # Bound to the running loop, which may differ between app lifespans
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._stop_event))
        logger.info(
            "rate_limit_sweeper.started",
            extra={"interval_s": self._interval, "max_age_ms": self._max_age_ms},
        )

    async def stop(self) -> None:
        """Stop the background task, cancelling it if it does not exit in time."""
        if self._task is None:
            return

        if self._stop_event is not None:
            self._stop_event.set()
        try:
            await asyncio.wait_for(self._task, timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning("rate_limit_sweeper.stop_timeout")
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        finally:
            self._task = None
            logger.info("rate_limit_sweeper.stopped")

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
            else:
                break

            try:
                deleted = self.run_once()
            except Exception as exc:
                logger.error(
                    "rate_limit_sweeper.failed",
                    extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
                )
                continue

            if deleted:
                logger.info("rate_limit_sweeper.swept", extra={"deleted_keys": deleted})
