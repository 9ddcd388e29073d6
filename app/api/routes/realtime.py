from __future__ import annotations

import logging
import random
import re
from typing import Annotated, Callable

from fastapi import APIRouter, Depends, Form

from app.adapters.rate_limit.registry import REALTIME
from app.adapters.realtime.base import AbstractRealtimeTransport
from app.api.deps import get_access_control, get_clock, get_realtime_transport
from app.core.auth import require_user
from app.core.errors import ValidationAppError
from app.core.rate_limit import enforce_rate_limit
from app.schemas.realtime import CollaborativeEditRequest, PresenceAuthResponse, TriggerResponse
from app.services.access_control import AccessControlService
from app.services.permissions import Permission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

PRESENCE_CHANNEL_RE = re.compile(r"^presence-component-(.+)$")
COLLABORATIVE_EDIT_EVENT = "collaborative:edit"

PRESENCE_COLORS = (
    "#EF4444",
    "#F59E0B",
    "#10B981",
    "#3B82F6",
    "#6366F1",
    "#8B5CF6",
    "#EC4899",
)


def component_channel(component_id: str) -> str:
    """Public channel the editors of a component listen on for live edits."""
    return f"component-{component_id}"


@router.post(
    "/realtime/auth",
    response_model=PresenceAuthResponse,
    dependencies=[Depends(enforce_rate_limit(REALTIME))],
)
def authenticate_presence_channel(
    user_id: Annotated[str, Depends(require_user)],
    access: Annotated[AccessControlService, Depends(get_access_control)],
    transport: Annotated[AbstractRealtimeTransport, Depends(get_realtime_transport)],
    socket_id: Annotated[str, Form()] = "",
    channel_name: Annotated[str, Form()] = "",
) -> PresenceAuthResponse:
    """Sign a presence channel subscription for a component editor.

    The channel must be ``presence-component-{componentId}`` and the caller
    must be a member of the component's workspace.

    Raises:
        ValidationAppError: 400 if socket_id/channel_name are missing or the
            channel name is not a component presence channel.
        NotFoundAppError: 404 if the component does not exist.
        AccessDeniedAppError: 403 if the caller cannot access the component.
    """
    if not socket_id or not channel_name:
        raise ValidationAppError(
            code="missing_parameters",
            message="Missing socket_id or channel_name",
        )

    match = PRESENCE_CHANNEL_RE.match(channel_name)
    if not match:
        raise ValidationAppError(
            code="invalid_channel_name",
            message="Invalid channel name",
            details={"channel_name": channel_name},
        )

    access.assert_component_access(match.group(1), user_id)

    payload = transport.authenticate_presence(
        socket_id,
        channel_name,
        {
            "user_id": user_id,
            "user_info": {"color": random.choice(PRESENCE_COLORS)},
        },
    )
    return PresenceAuthResponse(**payload)


@router.post(
    "/realtime/trigger",
    response_model=TriggerResponse,
    dependencies=[Depends(enforce_rate_limit(REALTIME))],
)
async def trigger_collaborative_edit(
    body: CollaborativeEditRequest,
    user_id: Annotated[str, Depends(require_user)],
    access: Annotated[AccessControlService, Depends(get_access_control)],
    transport: Annotated[AbstractRealtimeTransport, Depends(get_realtime_transport)],
    clock: Annotated[Callable[[], float], Depends(get_clock)],
) -> TriggerResponse:
    """Broadcast a live edit to the other editors of a component.

    Requires ``can_update_components`` on the component's workspace, so
    viewers can watch presence but cannot push edits.
    """
    access.require_component_permission(
        body.component_id,
        user_id,
        Permission.CAN_UPDATE_COMPONENTS,
        action="edit components",
    )

    await transport.trigger(
        component_channel(body.component_id),
        COLLABORATIVE_EDIT_EVENT,
        {
            "componentId": body.component_id,
            "userId": user_id,
            "field": body.field,
            "value": body.value,
            "timestamp": int(clock() * 1000),
        },
    )
    logger.info(
        "realtime.edit_broadcast",
        extra={"component_id": body.component_id, "field": body.field},
    )
    return TriggerResponse()
