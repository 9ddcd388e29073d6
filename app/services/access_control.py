"""Workspace and component access checks.

Resolves the caller's membership role through the repository, then defers
to the permission model for role-gated actions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.adapters.membership.base import AbstractMembershipRepository
from app.core.errors import AccessDeniedAppError, NotFoundAppError
from app.services.permissions import Permission, Role, assert_permission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentAccess:
    component_id: str
    workspace_id: str
    role: Role


class AccessControlService:
    """Membership-based access checks for workspace resources."""

    def __init__(self, repository: AbstractMembershipRepository) -> None:
        self._repository = repository

    def get_membership_role(self, workspace_id: str, user_id: str) -> Role | None:
        return self._repository.get_role(workspace_id, user_id)

    def assert_workspace_member(self, workspace_id: str, user_id: str) -> Role:
        """Return the caller's role in the workspace.

        Raises:
            NotFoundAppError: If the workspace does not exist.
            AccessDeniedAppError: If the user is not a member.
        """
        role = self._repository.get_role(workspace_id, user_id)
        if role is not None:
            return role

        if not self._repository.workspace_exists(workspace_id):
            raise NotFoundAppError(
                code="WORKSPACE_NOT_FOUND",
                message="Workspace not found",
                details={"workspace_id": workspace_id},
            )

        logger.warning("access.workspace_denied", extra={"workspace_id": workspace_id})
        raise AccessDeniedAppError(
            code="WORKSPACE_ACCESS_DENIED",
            message="You do not have access to this workspace",
            details={"workspace_id": workspace_id},
        )

    def assert_component_access(self, component_id: str, user_id: str) -> ComponentAccess:
        """Resolve the component's workspace and the caller's role in it.

        Raises:
            NotFoundAppError: If the component does not exist.
            AccessDeniedAppError: If the user is not a member of its workspace.
        """
        workspace_id = self._repository.get_component_workspace(component_id)
        if workspace_id is None:
            raise NotFoundAppError(
                code="COMPONENT_NOT_FOUND",
                message="Component not found",
                details={"component_id": component_id},
            )

        role = self._repository.get_role(workspace_id, user_id)
        if role is None:
            logger.warning(
                "access.component_denied",
                extra={"component_id": component_id, "workspace_id": workspace_id},
            )
            raise AccessDeniedAppError(
                code="COMPONENT_ACCESS_DENIED",
                message="You do not have access to this component",
                details={"component_id": component_id},
            )

        return ComponentAccess(component_id=component_id, workspace_id=workspace_id, role=role)

    def require_workspace_permission(
        self,
        workspace_id: str,
        user_id: str,
        permission: Permission | str,
        action: str | None = None,
    ) -> Role:
        role = self.assert_workspace_member(workspace_id, user_id)
        assert_permission(role, permission, action)
        return role

    def require_component_permission(
        self,
        component_id: str,
        user_id: str,
        permission: Permission | str,
        action: str | None = None,
    ) -> ComponentAccess:
        access = self.assert_component_access(component_id, user_id)
        assert_permission(access.role, permission, action)
        return access
