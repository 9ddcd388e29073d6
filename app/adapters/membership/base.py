from abc import ABC, abstractmethod

from app.services.permissions import Role


class AbstractMembershipRepository(ABC):
	"""Read access to workspaces, memberships and component ownership."""

	@abstractmethod
	def workspace_exists(self, workspace_id: str) -> bool:
		"""Return True when the workspace is known to the store."""
		...

	@abstractmethod
	def get_role(self, workspace_id: str, user_id: str) -> Role | None:
		"""Return the user's role in the workspace, or None when not a member."""
		...

	@abstractmethod
	def get_component_workspace(self, component_id: str) -> str | None:
		"""Return the id of the workspace owning the component, or None."""
		...
