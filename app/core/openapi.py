"""OpenAPI customization utilities.

Documents the trusted user-id header as a security scheme and adds tag
metadata, keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

from app.core.config import settings

_TAGS = (
    {"name": "Realtime", "description": "Rate-limited proxy to the pub/sub provider."},
    {"name": "Workspaces", "description": "Role and permission introspection."},
    {"name": "Health", "description": "Liveness check."},
)


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation.

    - Adds a ``UserIdHeader`` apiKey scheme for the session-provided header
    - Requires it on every operation except ``/health`` (``security: []``)
    - Adds tags metadata if not present
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        security_schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "UserIdHeader",
            {
                "type": "apiKey",
                "in": "header",
                "name": settings.app.user_id_header,
                "description": "Authenticated user id, set by the upstream session provider.",
            },
        )
        schema.setdefault("security", [{"UserIdHeader": []}])

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        tags.extend(dict(t) for t in _TAGS if t["name"] not in existing_tag_names)

        for path, methods in schema.get("paths", {}).items():
            if path.endswith("/health"):
                for method_obj in methods.values():
                    if isinstance(method_obj, dict):
                        method_obj["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
