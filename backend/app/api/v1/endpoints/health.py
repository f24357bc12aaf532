from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.dependencies import require_session
from app.models.auth import SessionRecord
from app.services.employee_client import employee_client

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    try:
        if employee_client.initialized:
            ok = await employee_client.check_connection()
            services["employee_api"] = "ok" if ok else "error"
        else:
            services["employee_api"] = "not_configured"
    except Exception:
        services["employee_api"] = "error"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/protected")
async def health_protected(session: SessionRecord = Depends(require_session)):  # noqa: B008
    return {"status": "ok", "user": session.username}


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
