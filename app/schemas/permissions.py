"""Pydantic schemas for permission introspection."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field


class RolePermissionsResponse(BaseModel):
    """Caller's role in a workspace and the full permission set it grants."""

    workspace_id: str
    role: str = Field(..., description="owner, editor or viewer.")
    permissions: Dict[str, bool] = Field(
        ..., description="Every permission key mapped to whether the role holds it."
    )
