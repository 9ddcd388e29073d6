"""Dict-backed membership repository for local runs and tests."""

from __future__ import annotations

import threading

from app.adapters.membership.base import AbstractMembershipRepository
from app.services.permissions import Role


class InMemoryMembershipRepository(AbstractMembershipRepository):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._workspaces: set[str] = set()
        self._roles: dict[tuple[str, str], Role] = {}
        self._component_workspace: dict[str, str] = {}

    def add_workspace(self, workspace_id: str, *, owner_id: str | None = None) -> None:
        """Register a workspace, optionally with its owner membership."""
        with self._lock:
            self._workspaces.add(workspace_id)
            if owner_id is not None:
                self._roles[(workspace_id, owner_id)] = Role.OWNER

    def add_member(self, workspace_id: str, user_id: str, role: Role | str) -> None:
        with self._lock:
            if workspace_id not in self._workspaces:
                raise KeyError(f"Unknown workspace: {workspace_id!r}")
            self._roles[(workspace_id, user_id)] = Role(role)

    def remove_member(self, workspace_id: str, user_id: str) -> None:
        with self._lock:
            self._roles.pop((workspace_id, user_id), None)

    def add_component(self, component_id: str, workspace_id: str) -> None:
        with self._lock:
            if workspace_id not in self._workspaces:
                raise KeyError(f"Unknown workspace: {workspace_id!r}")
            self._component_workspace[component_id] = workspace_id

    def workspace_exists(self, workspace_id: str) -> bool:
        with self._lock:
            return workspace_id in self._workspaces

    def get_role(self, workspace_id: str, user_id: str) -> Role | None:
        with self._lock:
            return self._roles.get((workspace_id, user_id))

    def get_component_workspace(self, component_id: str) -> str | None:
        with self._lock:
            return self._component_workspace.get(component_id)
