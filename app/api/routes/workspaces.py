from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.adapters.rate_limit.registry import API
from app.api.deps import get_access_control
from app.core.auth import require_user
from app.core.rate_limit import enforce_rate_limit
from app.schemas.permissions import RolePermissionsResponse
from app.services.access_control import AccessControlService
from app.services.permissions import get_role_permissions

router = APIRouter(tags=["Workspaces"])


@router.get(
    "/workspaces/{workspace_id}/permissions",
    response_model=RolePermissionsResponse,
    dependencies=[Depends(enforce_rate_limit(API))],
)
def get_workspace_permissions(
    workspace_id: str,
    user_id: Annotated[str, Depends(require_user)],
    access: Annotated[AccessControlService, Depends(get_access_control)],
) -> RolePermissionsResponse:
    """Return the caller's role in the workspace and what it allows.

    Used by clients to decide which actions to offer.

    Raises:
        NotFoundAppError: 404 if the workspace does not exist.
        AccessDeniedAppError: 403 if the caller is not a member.
    """
    role = access.assert_workspace_member(workspace_id, user_id)
    permissions = get_role_permissions(role)
    return RolePermissionsResponse(
        workspace_id=workspace_id,
        role=role.value,
        permissions={p.value: allowed for p, allowed in permissions.items()},
    )
