"""Pusher realtime transport adapter."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import pusher

from app.adapters.realtime.base import AbstractRealtimeTransport

logger = logging.getLogger(__name__)


class PusherRealtimeTransport(AbstractRealtimeTransport):
    """Transport backed by the official Pusher server SDK.

    The SDK is synchronous (HTTP via ``requests``), so ``trigger`` runs it in
    a worker thread to keep the event loop free.
    """

    def __init__(
        self,
        *,
        app_id: str,
        app_key: str,
        app_secret: str,
        cluster: str = "mt1",
        use_tls: bool = True,
        timeout_seconds: float = 5.0,
    ) -> None:
        """Initialize the Pusher client.

        Args:
            app_id: Pusher application id.
            app_key: Public application key.
            app_secret: Secret used to sign subscriptions and API calls.
            cluster: Pusher cluster (e.g., "mt1", "eu").
            use_tls: Call the HTTP API over TLS.
            timeout_seconds: Timeout for HTTP API calls in seconds.
        """
        self.client = pusher.Pusher(
            app_id=app_id,
            key=app_key,
            secret=app_secret,
            cluster=cluster,
            ssl=use_tls,
            timeout=timeout_seconds,
        )

    def authenticate_presence(
        self,
        socket_id: str,
        channel_name: str,
        presence: dict[str, Any],
    ) -> dict[str, str]:
        return self.client.authenticate_subscription(
            channel=channel_name,
            socket_id=socket_id,
            custom_data=presence,
        )

    async def trigger(self, channel: str, event: str, data: dict[str, Any]) -> None:
        """Publish ``event`` on ``channel`` through the Pusher HTTP API.

        Raises:
            pusher.errors.PusherError: If the API rejects the event; the
                global handler turns it into a 500.
        """
        try:
            await asyncio.to_thread(self.client.trigger, channel, event, data)
        except Exception as exc:
            logger.error(
                "realtime.trigger_failed",
                extra={
                    "channel_name": channel,
                    "event": event,
                    "error_type": type(exc).__name__,
                },
            )
            raise

        logger.info("realtime.event_triggered", extra={"channel_name": channel, "event": event})
