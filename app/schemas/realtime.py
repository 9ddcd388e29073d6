"""Pydantic schemas for the realtime proxy endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PresenceAuthResponse(BaseModel):
    """Signed presence subscription returned to the realtime client."""

    auth: str = Field(..., description="'{app_key}:{signature}' for the channel subscription.")
    channel_data: str = Field(
        ..., description="Compact JSON with user_id and user_info shown to channel peers."
    )


class CollaborativeEditRequest(BaseModel):
    """Live edit broadcast to the other editors of a component."""

    model_config = ConfigDict(populate_by_name=True)

    component_id: str = Field(..., alias="componentId", min_length=1)
    field: Literal["sourceCode", "docsMarkdown"] = Field(
        ..., description="Edited field: sourceCode or docsMarkdown."
    )
    value: str = Field(..., description="Full new value of the edited field.")


class TriggerResponse(BaseModel):
    success: bool = True
