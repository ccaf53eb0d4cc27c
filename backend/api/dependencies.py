from functools import lru_cache

from fastapi import Depends, HTTPException, status

from backend.core.config import settings
from backend.core.store import SessionEntry, SessionStore, store
from cinegrade.api.grading_client import GradingClient


def get_store() -> SessionStore:
    return store


@lru_cache
def get_grading_client() -> GradingClient:
    """Shared client for the AI grading service."""
    return GradingClient(
        endpoint=settings.GRADING_API_URL,
        api_key=settings.GRADING_API_KEY,
        timeout=settings.GRADING_TIMEOUT_S,
    )


async def get_session_entry(
    session_id: str,
    session_store: SessionStore = Depends(get_store),
) -> SessionEntry:
    """Resolve a session id from the path or raise 404."""
    entry = session_store.get(session_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return entry
