from enum import Enum

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from backend.core.config import settings
from backend.core.store import SessionEntry
from backend.api.dependencies import get_session_entry
from backend.api.v1.sessions import read_upload
from cinegrade.data.test_pattern import generate_test_pattern
from cinegrade.grading.params import GradeParameters
from cinegrade.inference.preview import render_preview
from cinegrade.utils.io import encode_png

router = APIRouter()


class PreviewView(str, Enum):
    SOURCE = "source"
    CHART = "chart"


def _render_png(image, params: GradeParameters | None) -> bytes:
    rendered = render_preview(
        image,
        params,
        max_edge=settings.PREVIEW_MAX_EDGE,
        workers=settings.PREVIEW_WORKERS,
    )
    return encode_png(rendered)


@router.get("/sessions/{session_id}/preview")
async def preview(
    view: PreviewView = Query(PreviewView.SOURCE),
    graded: bool = Query(True),
    entry: SessionEntry = Depends(get_session_entry),
):
    """Source image or test chart, graded with the active version.

    Without an active version the ungraded image is returned.
    """
    source_key, source = entry.snapshot()
    active = entry.session.active_version()
    params = active.params if graded and active is not None else None
    key = (source_key, view.value, active.id if params is not None else None)

    data = entry.cached_preview(key)
    if data is None:
        image = source if view == PreviewView.SOURCE else generate_test_pattern()
        data = await run_in_threadpool(_render_png, image, params)
        entry.store_preview(key, data)

    return Response(content=data, media_type="image/png")


@router.post("/sessions/{session_id}/preview")
async def preview_custom_image(
    file: UploadFile = File(...),
    entry: SessionEntry = Depends(get_session_entry),
):
    """Grade an arbitrary uploaded image with the active version."""
    image = await read_upload(file)
    active = entry.session.active_version()
    data = await run_in_threadpool(_render_png, image, active.params if active else None)
    return Response(content=data, media_type="image/png")


@router.get("/test-pattern")
async def test_pattern():
    data = await run_in_threadpool(lambda: encode_png(generate_test_pattern()))
    return Response(content=data, media_type="image/png")
