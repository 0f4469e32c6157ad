"""
admin_identity.api.app

FastAPI app factory for the Admin Identity service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Build and dispose the service container in the app lifespan.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from admin_identity import __version__
from admin_identity.api.methods import build_admin_methods
from admin_identity.api.routers.admins import router as admins_router
from admin_identity.api.routers.health import router as health_router
from admin_identity.observability.logging import configure_logging, get_logger
from admin_identity.observability.middleware import RequestContextMiddleware
from admin_identity.settings import Settings
from admin_identity.wiring import build_container

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        container = await build_container(settings)
        app.state.container = container
        app.state.admin_methods = build_admin_methods(container.admins)
        log.info("admins_count", count=await container.admins.count())
        try:
            yield
        finally:
            # Stops the hash pool and closes pooled DB connections.
            await container.aclose()
            log.info("shutdown")

    app = FastAPI(
        title="Admin Identity",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(admins_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; business logic stays
# in services.
