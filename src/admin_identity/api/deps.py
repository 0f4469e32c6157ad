"""
admin_identity.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the service container and method table built at startup.
"""

from __future__ import annotations

from fastapi import Request

from admin_identity.api.methods import MethodSpec
from admin_identity.wiring import ServiceContainer


def container_from_app(request: Request) -> ServiceContainer:
    # The container is built in the app lifespan (`admin_identity.api.app.create_app`).
    return request.app.state.container  # type: ignore[attr-defined]


def admin_methods(request: Request) -> dict[str, MethodSpec]:
    return request.app.state.admin_methods  # type: ignore[attr-defined]


# --- Module Notes -----------------------------------------------------------
# Identity operations never take a request session; the store manages its own sessions.
