"""In-process realtime transport.

Signs presence subscriptions the way Pusher expects (HMAC-SHA256 over
``socket_id:channel:channel_data``) and keeps the most recent triggered
events in memory instead of sending them over the network. Used by tests and
local runs that have no Pusher account.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any

from app.adapters.realtime.base import AbstractRealtimeTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TriggeredEvent:
    channel: str
    event: str
    data: dict[str, Any]


class InProcessRealtimeTransport(AbstractRealtimeTransport):
    """Recording transport; only the last ``max_events`` events are kept."""

    def __init__(self, *, app_key: str, app_secret: str, max_events: int = 1000) -> None:
        self._app_key = app_key
        self._app_secret = app_secret.encode()
        self.events: deque[TriggeredEvent] = deque(maxlen=max_events)

    def sign(self, value: str) -> str:
        return hmac.new(self._app_secret, value.encode(), hashlib.sha256).hexdigest()

    def authenticate_presence(
        self,
        socket_id: str,
        channel_name: str,
        presence: dict[str, Any],
    ) -> dict[str, str]:
        channel_data = json.dumps(presence, separators=(",", ":"))
        signature = self.sign(f"{socket_id}:{channel_name}:{channel_data}")

        logger.debug("realtime.presence_authenticated", extra={"channel_name": channel_name})
        return {
            "auth": f"{self._app_key}:{signature}",
            "channel_data": channel_data,
        }

    async def trigger(self, channel: str, event: str, data: dict[str, Any]) -> None:
        self.events.append(TriggeredEvent(channel=channel, event=event, data=data))
        logger.info("realtime.event_triggered", extra={"channel_name": channel, "event": event})
