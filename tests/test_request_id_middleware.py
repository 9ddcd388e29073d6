from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.core.app_factory import create_app


@pytest.fixture
def client(repository, transport, clock):
    app = create_app(membership_repository=repository, realtime_transport=transport, clock=clock.time)
    with TestClient(app) as c:
        yield c


def test_preserves_incoming_request_id_header(client: TestClient):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_error_body_carries_request_id(client: TestClient):
    resp = client.get(
        "/v1/workspaces/ws-2/permissions",
        headers={"X-User-Id": "carol", "X-Request-ID": "req-denied-1"},
    )

    assert resp.status_code == 403
    assert resp.headers["X-Request-ID"] == "req-denied-1"
    assert resp.json()["error"]["request_id"] == "req-denied-1"


def test_module_level_app_is_importable():
    from app.main import app

    assert app.state.rate_limiters.api.limit >= 1
