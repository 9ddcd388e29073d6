"""Realtime adapter layer - abstracts over the pub/sub provider."""

from app.adapters.realtime.base import AbstractRealtimeTransport
from app.adapters.realtime.factory import create_realtime_transport
from app.adapters.realtime.in_process import InProcessRealtimeTransport
from app.adapters.realtime.pusher_client import PusherRealtimeTransport

__all__ = [
    "AbstractRealtimeTransport",
    "InProcessRealtimeTransport",
    "PusherRealtimeTransport",
    "create_realtime_transport",
]
