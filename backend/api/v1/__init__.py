from fastapi import APIRouter
from . import sessions, grades, exports, previews, health

router = APIRouter(prefix="/v1")

router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
router.include_router(grades.router, prefix="/sessions/{session_id}/grades", tags=["grades"])
router.include_router(exports.router, prefix="/sessions", tags=["exports"])
router.include_router(previews.router, tags=["previews"])
router.include_router(health.router, tags=["health"])

__all__ = ["router"]
