from abc import ABC, abstractmethod
from typing import Any


class AbstractRealtimeTransport(ABC):
	"""Interface for the pub/sub provider broadcasting presence and edits."""

	@abstractmethod
	def authenticate_presence(
		self,
		socket_id: str,
		channel_name: str,
		presence: dict[str, Any],
	) -> dict[str, str]:
		"""Authorize a socket to join a presence channel.

		Args:
			socket_id: Connection id assigned by the provider.
			channel_name: Presence channel being joined.
			presence: Member data (``user_id`` and ``user_info``) shown to peers.

		Returns:
			dict[str, str]: Payload the client hands back to the provider
			(``auth`` and ``channel_data``).
		"""
		...

	@abstractmethod
	async def trigger(self, channel: str, event: str, data: dict[str, Any]) -> None:
		"""Broadcast ``event`` with ``data`` on ``channel``."""
		...
