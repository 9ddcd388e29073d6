"""Role-based permission model for workspace memberships.

Every role maps every permission to a boolean. The matrix is checked at
import time: it must be total (no missing cell) and monotonic in role rank
(owner ⊇ editor ⊇ viewer).
"""

from __future__ import annotations

import enum
import logging
from types import MappingProxyType
from typing import Mapping

from app.core.errors import PermissionDeniedAppError

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    """Access level of a user inside one workspace."""

    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]


_ROLE_RANK = {Role.VIEWER: 0, Role.EDITOR: 1, Role.OWNER: 2}


class Permission(str, enum.Enum):
    """Named capabilities gated by role."""

    # Workspace management
    CAN_UPDATE_WORKSPACE = "can_update_workspace"
    CAN_DELETE_WORKSPACE = "can_delete_workspace"
    CAN_MAKE_WORKSPACE_PUBLIC = "can_make_workspace_public"
    # Member management
    CAN_ADD_MEMBERS = "can_add_members"
    CAN_REMOVE_MEMBERS = "can_remove_members"
    CAN_CHANGE_MEMBER_ROLES = "can_change_member_roles"
    CAN_SEND_INVITATIONS = "can_send_invitations"
    # Component management
    CAN_CREATE_COMPONENTS = "can_create_components"
    CAN_UPDATE_COMPONENTS = "can_update_components"
    CAN_DELETE_COMPONENTS = "can_delete_components"
    CAN_SET_CANONICAL_VERSION = "can_set_canonical_version"
    # Viewing
    CAN_VIEW_COMPONENTS = "can_view_components"
    CAN_VIEW_ANALYTICS = "can_view_analytics"
    CAN_VIEW_ACTIVITY = "can_view_activity"


WORKSPACE_PERMISSIONS = frozenset(
    {
        Permission.CAN_UPDATE_WORKSPACE,
        Permission.CAN_DELETE_WORKSPACE,
        Permission.CAN_MAKE_WORKSPACE_PUBLIC,
    }
)
MEMBER_PERMISSIONS = frozenset(
    {
        Permission.CAN_ADD_MEMBERS,
        Permission.CAN_REMOVE_MEMBERS,
        Permission.CAN_CHANGE_MEMBER_ROLES,
        Permission.CAN_SEND_INVITATIONS,
    }
)
COMPONENT_PERMISSIONS = frozenset(
    {
        Permission.CAN_CREATE_COMPONENTS,
        Permission.CAN_UPDATE_COMPONENTS,
        Permission.CAN_DELETE_COMPONENTS,
        Permission.CAN_SET_CANONICAL_VERSION,
    }
)
VIEW_PERMISSIONS = frozenset(
    {
        Permission.CAN_VIEW_COMPONENTS,
        Permission.CAN_VIEW_ANALYTICS,
        Permission.CAN_VIEW_ACTIVITY,
    }
)

_GRANTS: dict[Role, frozenset[Permission]] = {
    Role.OWNER: WORKSPACE_PERMISSIONS | MEMBER_PERMISSIONS | COMPONENT_PERMISSIONS | VIEW_PERMISSIONS,
    Role.EDITOR: COMPONENT_PERMISSIONS | VIEW_PERMISSIONS,
    Role.VIEWER: VIEW_PERMISSIONS,
}


def _build_matrix(
    grants: Mapping[Role, frozenset[Permission]],
) -> Mapping[Role, Mapping[Permission, bool]]:
    """Expand grants into a read-only role x permission table and validate it.

    Raises:
        RuntimeError: If a role is missing, or a lower role holds a
            permission a higher role lacks.
    """
    missing_roles = set(Role) - set(grants)
    if missing_roles:
        raise RuntimeError(f"Permission matrix has no entry for roles: {sorted(missing_roles)}")

    matrix = {
        role: MappingProxyType({p: p in grants[role] for p in Permission})
        for role in Role
    }

    ordered = sorted(Role, key=lambda r: r.rank)
    for lower, higher in zip(ordered, ordered[1:]):
        for permission in Permission:
            if matrix[lower][permission] and not matrix[higher][permission]:
                raise RuntimeError(
                    f"Permission matrix is not monotonic: {lower.value} has "
                    f"{permission.value} but {higher.value} does not"
                )

    return MappingProxyType(matrix)


ROLE_PERMISSIONS: Mapping[Role, Mapping[Permission, bool]] = _build_matrix(_GRANTS)


def has_permission(role: Role | str, permission: Permission | str) -> bool:
    """Check whether ``role`` holds ``permission``.

    Args:
        role: Role member or its string value (e.g. "editor").
        permission: Permission member or its string value.

    Raises:
        ValueError: If ``role`` or ``permission`` is not a known value. This
            is a programming error, not a denial.
    """
    return ROLE_PERMISSIONS[Role(role)][Permission(permission)]


def assert_permission(
    role: Role | str,
    permission: Permission | str,
    action: str | None = None,
) -> None:
    """Raise unless ``role`` holds ``permission``.

    Args:
        role: Role of the caller.
        permission: Permission required for the action.
        action: Optional human-readable description used in the message
            instead of the raw permission key.

    Raises:
        PermissionDeniedAppError: If the role lacks the permission.
    """
    role = Role(role)
    permission = Permission(permission)
    if has_permission(role, permission):
        return

    message = (
        f"PERMISSION_DENIED: {role.value} role does not have permission to "
        f"{action or permission.value}"
    )
    logger.info(
        "permission.denied",
        extra={"role": role.value, "permission": permission.value},
    )
    raise PermissionDeniedAppError(
        code="PERMISSION_DENIED",
        message=message,
        details={"role": role.value, "permission": permission.value},
    )


def get_role_permissions(role: Role | str) -> Mapping[Permission, bool]:
    """Return the full, read-only permission mapping of ``role``.

    The same mapping object is returned on every call for a given role.
    """
    return ROLE_PERMISSIONS[Role(role)]


def roles_with_permission(permission: Permission | str) -> list[Role]:
    """List roles holding ``permission``, highest rank first."""
    permission = Permission(permission)
    return sorted(
        (role for role in Role if ROLE_PERMISSIONS[role][permission]),
        key=lambda r: r.rank,
        reverse=True,
    )
