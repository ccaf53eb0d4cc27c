import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from backend.core.config import settings
from backend.core.store import SessionEntry, SessionStore
from backend.schemas import SessionResponse, SuggestionRequest, SuggestionResponse
from backend.api.dependencies import get_grading_client, get_session_entry, get_store
from cinegrade.api.grading_client import GradingClient
from cinegrade.utils.io import decode_image

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_upload(file: UploadFile):
    """Validate an uploaded image and decode it to an RGB array."""
    if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail="Unsupported image format")

    data = await file.read()
    if len(data) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")

    try:
        return await run_in_threadpool(decode_image, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def to_response(entry: SessionEntry) -> SessionResponse:
    height, width = entry.source.shape[:2]
    return SessionResponse(
        session_id=entry.session_id,
        width=width,
        height=height,
        version_count=len(entry.session),
        active_id=entry.session.active_id,
    )


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    file: UploadFile = File(...),
    session_store: SessionStore = Depends(get_store),
):
    source = await read_upload(file)
    entry = session_store.create(source)
    return to_response(entry)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(entry: SessionEntry = Depends(get_session_entry)):
    return to_response(entry)


@router.put("/{session_id}/source", response_model=SessionResponse)
async def replace_source(
    file: UploadFile = File(...),
    entry: SessionEntry = Depends(get_session_entry),
):
    """Upload a new source image. The grade history is discarded."""
    source = await read_upload(file)
    entry.replace_source(source)
    logger.info(f"Replaced source of session {entry.session_id}")
    return to_response(entry)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    session_store: SessionStore = Depends(get_store),
):
    if not session_store.delete(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")


@router.post("/{session_id}/suggestions", response_model=SuggestionResponse)
async def suggest_styles(
    request: SuggestionRequest,
    entry: SessionEntry = Depends(get_session_entry),
    client: GradingClient = Depends(get_grading_client),
):
    language = request.language or settings.DEFAULT_LANGUAGE
    suggestions = await run_in_threadpool(client.suggest_styles, entry.source, language)
    return SuggestionResponse(suggestions=suggestions)
