"""
admin_identity.api.routers.health

Liveness and readiness probes.

Responsibilities:
- `/healthz`: the process serves HTTP.
- `/readyz`: the admin store answers a query, so the database and the `admins` table are usable.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from admin_identity.api.deps import container_from_app
from admin_identity.observability.logging import get_logger
from admin_identity.wiring import ServiceContainer

router = APIRouter()

log = get_logger(__name__)


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(container: ServiceContainer = Depends(container_from_app)) -> dict[str, str | int]:
    try:
        admins = await container.admin_store.count()
    except SQLAlchemyError as e:
        log.warning("readiness_failed", error=type(e).__name__)
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="admin store unavailable") from e
    return {"status": "ready", "admins": admins}


# --- Module Notes -----------------------------------------------------------
# A missing migration fails `/readyz` (no such table) even though `SELECT 1` would pass.
