"""Unit tests for membership-based access checks."""

import pytest

from app.core.errors import AccessDeniedAppError, NotFoundAppError, PermissionDeniedAppError
from app.services.access_control import AccessControlService, ComponentAccess
from app.services.permissions import Permission, Role


@pytest.fixture
def access(repository) -> AccessControlService:
    return AccessControlService(repository)


def test_member_role_is_returned(access) -> None:
    assert access.assert_workspace_member("ws-1", "alice") is Role.OWNER
    assert access.assert_workspace_member("ws-1", "bob") is Role.EDITOR
    assert access.assert_workspace_member("ws-1", "carol") is Role.VIEWER


def test_missing_workspace(access) -> None:
    with pytest.raises(NotFoundAppError) as exc_info:
        access.assert_workspace_member("ws-404", "alice")

    assert exc_info.value.code == "WORKSPACE_NOT_FOUND"


def test_non_member_denied(access) -> None:
    with pytest.raises(AccessDeniedAppError) as exc_info:
        access.assert_workspace_member("ws-2", "alice")

    assert exc_info.value.code == "WORKSPACE_ACCESS_DENIED"


def test_component_access(access) -> None:
    assert access.assert_component_access("cmp-1", "carol") == ComponentAccess(
        component_id="cmp-1", workspace_id="ws-1", role=Role.VIEWER
    )


def test_missing_component(access) -> None:
    with pytest.raises(NotFoundAppError) as exc_info:
        access.assert_component_access("cmp-404", "alice")

    assert exc_info.value.code == "COMPONENT_NOT_FOUND"


def test_component_of_foreign_workspace(access) -> None:
    with pytest.raises(AccessDeniedAppError) as exc_info:
        access.assert_component_access("cmp-2", "bob")

    assert exc_info.value.code == "COMPONENT_ACCESS_DENIED"


def test_require_workspace_permission(access) -> None:
    assert access.require_workspace_permission("ws-1", "alice", "can_delete_workspace") is Role.OWNER

    with pytest.raises(PermissionDeniedAppError) as exc_info:
        access.require_workspace_permission(
            "ws-1", "bob", Permission.CAN_DELETE_WORKSPACE, "delete this workspace"
        )

    assert "editor role does not have permission to delete this workspace" in str(exc_info.value)


def test_require_component_permission(access) -> None:
    assert access.require_component_permission("cmp-1", "bob", "can_update_components").role is Role.EDITOR

    with pytest.raises(PermissionDeniedAppError):
        access.require_component_permission("cmp-1", "carol", "can_update_components")


def test_membership_changes_are_visible(access, repository) -> None:
    repository.remove_member("ws-1", "bob")

    assert access.get_membership_role("ws-1", "bob") is None
    with pytest.raises(AccessDeniedAppError):
        access.assert_workspace_member("ws-1", "bob")


def test_repository_rejects_unknown_workspace(repository) -> None:
    with pytest.raises(KeyError):
        repository.add_member("ws-404", "eve", "viewer")
    with pytest.raises(ValueError):
        repository.add_member("ws-1", "eve", "admin")
