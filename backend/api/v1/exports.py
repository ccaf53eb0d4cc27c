import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from backend.core.config import settings
from backend.core.store import SessionEntry
from backend.api.dependencies import get_session_entry
from cinegrade.inference.export import export_lut

logger = logging.getLogger(__name__)

router = APIRouter()


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and an RFC 5987 UTF-8 name."""
    fallback = "".join(
        c if c.isascii() and c.isprintable() else "_" for c in filename if c not in '"\\'
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.get("/{session_id}/export")
async def export_active_grade(
    format: str = Query("cube", description="cube or png"),
    filename: str | None = Query(None, description="Defaults to the version display name"),
    entry: SessionEntry = Depends(get_session_entry),
):
    """Download the active version as a .cube or Hald PNG LUT."""
    # InvalidSessionStateError / LutSerializationError are mapped in main.py
    version = entry.session.require_active()
    result = await run_in_threadpool(
        export_lut,
        version.params,
        filename or version.display_name,
        format,
        settings.LUT_GRID_SIZE,
    )

    logger.info(f"Exported {result.filename} ({len(result.content)} bytes) from session {entry.session_id}")
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": content_disposition(result.filename)},
    )
