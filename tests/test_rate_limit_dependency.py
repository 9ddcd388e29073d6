"""Tests for the HTTP rate limiting dependency and identifier derivation."""

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request
import pytest

from app.adapters.rate_limit.base import RateLimitConfig, RateLimitResult
from app.adapters.rate_limit.registry import RateLimiterRegistry
from app.core.config import settings
from app.core.rate_limit import build_rate_limit_headers, enforce_rate_limit, get_request_identifier


def _request(headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        }
    )


class TestRequestIdentifier:
    def test_prefers_user_id(self) -> None:
        request = _request({"cf-connecting-ip": "203.0.113.1"})
        assert get_request_identifier(request, "user-42") == "user-42"

    def test_cdn_header_first(self) -> None:
        request = _request(
            {
                "cf-connecting-ip": "203.0.113.1",
                "x-real-ip": "203.0.113.2",
                "x-forwarded-for": "203.0.113.3",
            }
        )
        assert get_request_identifier(request) == "203.0.113.1"

    def test_real_ip_before_forwarded_for(self) -> None:
        request = _request({"x-real-ip": "203.0.113.2", "x-forwarded-for": "203.0.113.3"})
        assert get_request_identifier(request) == "203.0.113.2"

    def test_first_forwarded_for_entry(self) -> None:
        request = _request({"x-forwarded-for": " 198.51.100.7 , 10.0.0.1, 10.0.0.2"})
        assert get_request_identifier(request) == "198.51.100.7"

    def test_unknown_when_no_headers(self) -> None:
        assert get_request_identifier(_request({})) == "unknown"


def test_headers_for_blocked_result() -> None:
    result = RateLimitResult(
        allowed=False, limit=5, remaining=0, reset=1_700_000_060_000, retry_after_seconds=42
    )

    assert build_rate_limit_headers(result) == {
        "X-RateLimit-Limit": "5",
        "X-RateLimit-Remaining": "0",
        "X-RateLimit-Reset": "1700000060000",
        "Retry-After": "42",
    }


def test_headers_for_allowed_result_have_no_retry_after() -> None:
    result = RateLimitResult(allowed=True, limit=5, remaining=3, reset=1_700_000_060_000)

    headers = build_rate_limit_headers(result)

    assert "Retry-After" not in headers
    assert headers["X-RateLimit-Remaining"] == "3"


@pytest.fixture
def client(clock) -> TestClient:
    app = FastAPI()
    app.state.rate_limiters = RateLimiterRegistry(
        {"strict": RateLimitConfig(max_requests=2, window_ms=60_000, identifier="strict")},
        clock=clock.time,
    )

    @app.get("/limited", dependencies=[Depends(enforce_rate_limit("strict"))])
    def limited() -> dict:
        return {"ok": True}

    return TestClient(app)


def test_accepted_responses_carry_live_headers(client: TestClient) -> None:
    first = client.get("/limited", headers={"X-User-Id": "u1"})
    second = client.get("/limited", headers={"X-User-Id": "u1"})

    assert first.status_code == 200
    assert first.headers["X-RateLimit-Limit"] == "2"
    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert first.headers["X-RateLimit-Reset"] == str(1_000_000 + 60_000)
    assert second.headers["X-RateLimit-Remaining"] == "0"


def test_exhausted_budget_returns_429(client: TestClient) -> None:
    for _ in range(2):
        client.get("/limited", headers={"X-User-Id": "u1"})

    response = client.get("/limited", headers={"X-User-Id": "u1"})

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "60"
    assert response.headers["X-RateLimit-Limit"] == "2"
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert response.headers["X-RateLimit-Reset"] == str(1_000_000 + 60_000)
    assert response.json()["detail"] == {"error": "Too many requests", "retryAfter": 60}


def test_users_and_ips_are_limited_separately(client: TestClient) -> None:
    for _ in range(3):
        client.get("/limited", headers={"X-User-Id": "u1"})

    assert client.get("/limited", headers={"X-User-Id": "u2"}).status_code == 200
    assert client.get("/limited", headers={"X-Real-IP": "203.0.113.9"}).status_code == 200


def test_disabled_rate_limit_skips_checks(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(settings.app, "rate_limit_enabled", False)

    responses = [client.get("/limited", headers={"X-User-Id": "u1"}) for _ in range(5)]

    assert all(r.status_code == 200 for r in responses)
    assert "X-RateLimit-Limit" not in responses[0].headers


def test_headers_can_be_turned_off(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(settings.app, "rate_limit_include_headers", False)

    for _ in range(2):
        ok = client.get("/limited", headers={"X-User-Id": "u1"})
    blocked = client.get("/limited", headers={"X-User-Id": "u1"})

    assert "X-RateLimit-Limit" not in ok.headers
    assert blocked.status_code == 429
    assert "Retry-After" not in blocked.headers


def test_user_header_keys_the_budget_over_client_ip(client: TestClient) -> None:
    # The user id header is trusted as-is; the edge proxy has to sanitise it
    ip = {"X-Real-IP": "203.0.113.9"}
    for _ in range(2):
        client.get("/limited", headers=ip)

    assert client.get("/limited", headers=ip).status_code == 429
    assert client.get("/limited", headers={**ip, "X-User-Id": "u9"}).status_code == 200
