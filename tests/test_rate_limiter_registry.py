"""Tests for the named limiter registry."""

import pytest

from app.adapters.rate_limit.base import RateLimitConfig
from app.adapters.rate_limit.registry import (
    API,
    AUTH,
    EXPENSIVE,
    REALTIME,
    RateLimiterRegistry,
    build_rate_limiters,
    default_limiter_configs,
)
from app.core.config import AppSettings


def test_default_presets() -> None:
    configs = default_limiter_configs(AppSettings())

    assert {name: (c.max_requests, c.window_ms) for name, c in configs.items()} == {
        AUTH: (5, 60_000),
        REALTIME: (60, 60_000),
        API: (100, 60_000),
        EXPENSIVE: (10, 60_000),
    }
    assert all(c.identifier == name for name, c in configs.items())


def test_presets_share_store_but_not_counts(clock) -> None:
    registry = build_rate_limiters(AppSettings(), clock=clock.time)

    for _ in range(5):
        registry.auth.check("user-1")

    assert registry.auth.check("user-1").allowed is False
    assert registry.realtime.check("user-1").remaining == 59
    assert registry.api.check("user-1").remaining == 99
    assert registry.expensive.check("user-1").remaining == 9
    assert len(registry.store) == 4


def test_separate_registries_do_not_share_state(clock) -> None:
    first = build_rate_limiters(AppSettings(), clock=clock.time)
    second = build_rate_limiters(AppSettings(), clock=clock.time)

    for _ in range(5):
        first.auth.check("user-1")

    assert second.auth.check("user-1").allowed is True


def test_unknown_limiter_name() -> None:
    registry = build_rate_limiters(AppSettings())

    with pytest.raises(KeyError):
        registry.get("missing")


def test_duplicate_identifiers_rejected() -> None:
    config = RateLimitConfig(max_requests=1, window_ms=1000, identifier="dup")

    with pytest.raises(ValueError):
        RateLimiterRegistry({"a": config, "b": config})


def test_longest_window(clock) -> None:
    registry = RateLimiterRegistry(
        {
            "short": RateLimitConfig(max_requests=1, window_ms=1_000, identifier="short"),
            "long": RateLimitConfig(max_requests=1, window_ms=7_200_000, identifier="long"),
        },
        clock=clock.time,
    )

    assert registry.longest_window_ms() == 7_200_000
    assert sorted(registry) == ["long", "short"]
