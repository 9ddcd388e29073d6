"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

from app.core.logging import JsonFormatter, RequestIdFilter, SensitiveDataFilter, clear_request_id, set_request_id


def _capture(name: str) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_realtime_credentials():
    """Ensure presence signatures and secrets never reach the logs."""

    logger, stream = _capture("test_redaction")

    logger.info(
        "presence_event",
        extra={
            "auth": "test-app-key:deadbeef",
            "channel_data": '{"user_id":"alice"}',
            "app_secret": "super-secret",
            "socket_id": "123.456",
            "channel_name": "presence-component-cmp-1",
        },
    )

    output = stream.getvalue()

    assert "deadbeef" not in output
    assert "super-secret" not in output
    assert "123.456" not in output
    assert "[REDACTED]" in output
    assert "presence-component-cmp-1" in output


def test_sensitive_filter_redacts_identity_and_content():
    """Ensure user ids, client IPs and edited content are redacted."""

    logger, stream = _capture("test_identity_redaction")

    logger.info(
        "edit_event",
        extra={
            "user_id": "alice@example.com",
            "x-forwarded-for": "203.0.113.7",
            "value": "export const Secret = () => null;",
            "limit": 60,
        },
    )

    output = stream.getvalue()

    assert "alice@example.com" not in output
    assert "203.0.113.7" not in output
    assert "Secret" not in output
    assert '"limit": 60' in output


def test_sensitive_filter_allows_safe_fields():
    """Verify safe fields pass through unmodified."""

    logger, stream = _capture("test_safe_fields")

    logger.info(
        "safe_event",
        extra={
            "request_id": "req-123",
            "route": "/v1/realtime/auth",
            "status": 200,
            "key_hash": "0123456789abcdef",
        },
    )

    output = stream.getvalue()

    assert "req-123" in output
    assert "/v1/realtime/auth" in output
    assert "0123456789abcdef" in output
    assert "[REDACTED]" not in output


def test_sensitive_filter_redacts_nested_dicts():
    """Ensure nested sensitive fields are redacted."""

    logger, stream = _capture("test_nested")

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "X-User-Id": "alice",
                "user-agent": "pytest",
            },
            "presence": [{"socket_id": "1.2"}, {"role": "editor"}],
        },
    )

    payload = json.loads(stream.getvalue())

    assert payload["headers"]["X-User-Id"] == "[REDACTED]"
    assert payload["headers"]["user-agent"] == "pytest"
    assert payload["presence"][0]["socket_id"] == "[REDACTED]"
    assert payload["presence"][1]["role"] == "editor"


def test_request_id_is_attached_from_context():
    logger, stream = _capture("test_request_id")

    set_request_id("req-ctx-1")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-ctx-1"
