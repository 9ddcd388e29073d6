from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.realtime import router as realtime_router
from app.api.routes.workspaces import router as workspaces_router

__all__ = ["health_router", "realtime_router", "workspaces_router"]
