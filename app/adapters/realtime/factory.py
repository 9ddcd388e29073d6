"""Factory for the realtime transport."""

from app.adapters.realtime.base import AbstractRealtimeTransport
from app.adapters.realtime.pusher_client import PusherRealtimeTransport
from app.core.config import settings
from app.core.errors import ValidationAppError


def create_realtime_transport() -> AbstractRealtimeTransport:
    """Instantiate the Pusher transport from ``settings.realtime``.

    Returns:
        AbstractRealtimeTransport: Configured transport instance.

    Raises:
        ValidationAppError: If the app id or signing secret is not configured.
    """
    cfg = settings.realtime

    if not cfg.app_id:
        raise ValidationAppError(
            code="realtime_missing_app_id",
            message="Realtime transport requires REALTIME_APP_ID environment variable",
        )

    if not cfg.app_secret:
        raise ValidationAppError(
            code="realtime_missing_secret",
            message="Realtime transport requires REALTIME_APP_SECRET environment variable",
        )

    return PusherRealtimeTransport(
        app_id=cfg.app_id,
        app_key=cfg.app_key,
        app_secret=cfg.app_secret,
        cluster=cfg.cluster,
        use_tls=cfg.use_tls,
        timeout_seconds=cfg.timeout_seconds,
    )
