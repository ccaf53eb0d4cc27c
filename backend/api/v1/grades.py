import logging

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from backend.core.config import settings
from backend.core.store import SessionEntry
from backend.schemas import (
    ActivateRequest,
    GradeCreateRequest,
    HistoryResponse,
    VersionResponse,
)
from backend.api.dependencies import get_grading_client, get_session_entry
from cinegrade.api.grading_client import GradeRequest, GradingClient
from cinegrade.grading.session import GradingMode
from cinegrade.utils.io import decode_data_url

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=VersionResponse, status_code=status.HTTP_201_CREATED)
async def create_grade(
    request: GradeCreateRequest,
    entry: SessionEntry = Depends(get_session_entry),
    client: GradingClient = Depends(get_grading_client),
):
    """Ask the AI service for a grade and append it as the new active version.

    Service failures still produce a neutral version whose description
    carries the failure message.
    """
    prompt = (request.prompt or "").strip()
    reference = None

    if request.mode == GradingMode.PROMPT and not prompt:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")

    if request.mode == GradingMode.REFERENCE:
        if not request.reference_image:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reference image is required")
        try:
            reference = decode_data_url(request.reference_image)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    # One generation in flight per session
    if not entry.generation_lock.acquire(blocking=False):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A grade is already being generated")

    try:
        source_key = entry.session.source_key
        params = await run_in_threadpool(
            client.generate_grade,
            GradeRequest(
                source_image=entry.source,
                reference_image=reference,
                prompt=prompt or None,
                language=request.language or settings.DEFAULT_LANGUAGE,
            ),
        )

        if entry.session.source_key != source_key:
            logger.info(f"Discarding grade for session {entry.session_id}: source changed")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Source image changed during generation")

        provenance = prompt if request.mode == GradingMode.PROMPT else ""
        version = entry.session.append(params, provenance, request.mode)
    finally:
        entry.generation_lock.release()

    return VersionResponse.from_version(version)


@router.get("", response_model=HistoryResponse)
async def list_grades(entry: SessionEntry = Depends(get_session_entry)):
    """Grade history, newest first."""
    return HistoryResponse(
        active_id=entry.session.active_id,
        items=[VersionResponse.from_version(v) for v in entry.session],
    )


@router.put("/active", response_model=VersionResponse)
async def set_active_grade(
    request: ActivateRequest,
    entry: SessionEntry = Depends(get_session_entry),
):
    if not entry.session.set_active(request.version_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Version not found")
    return VersionResponse.from_version(entry.session.require_active())
