"""In-memory rate limit store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import logging
import threading

from app.adapters.rate_limit.base import AbstractRateLimitStore, RequestRecord

logger = logging.getLogger(__name__)


class InMemoryRateLimitStore(AbstractRateLimitStore):
    """Dict-backed store shared by every limiter of a process."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records_by_key: dict[str, list[RequestRecord]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records_by_key)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records_by_key

    def get(self, key: str) -> list[RequestRecord]:
        with self._lock:
            return list(self._records_by_key.get(key, ()))

    def set(self, key: str, records: list[RequestRecord]) -> None:
        with self._lock:
            if records:
                self._records_by_key[key] = list(records)
            else:
                self._records_by_key.pop(key, None)

    def delete(self, key: str) -> None:
        with self._lock:
            self._records_by_key.pop(key, None)

    def sweep_expired(self, *, now_ms: int, max_age_ms: int) -> int:
        cutoff = now_ms - max_age_ms
        deleted = 0

        with self._lock:
            for key in list(self._records_by_key):
                kept = [r for r in self._records_by_key[key] if r.timestamp > cutoff]
                if kept:
                    self._records_by_key[key] = kept
                else:
                    del self._records_by_key[key]
                    deleted += 1
            remaining_keys = len(self._records_by_key)

        logger.debug(
            "rate_limit_store.swept",
            extra={"deleted_keys": deleted, "remaining_keys": remaining_keys},
        )
        return deleted

    def clear(self) -> None:
        """Remove every stored key."""

        with self._lock:
            self._records_by_key.clear()
