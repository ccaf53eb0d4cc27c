from fastapi import APIRouter, Depends, status
from datetime import datetime, timezone

from backend.core.config import settings
from backend.core.store import SessionStore
from backend.api.dependencies import get_store

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "ok",
        "version": settings.API_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready", status_code=status.HTTP_200_OK)
async def readiness_check(session_store: SessionStore = Depends(get_store)):
    """Readiness check - report whether the grading service is configured."""
    checks = {
        "grading_service": "ok" if settings.GRADING_API_URL else "not_configured",
    }

    return {
        "status": "ready" if all(v == "ok" for v in checks.values()) else "degraded",
        "checks": checks,
        "sessions": len(session_store),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
