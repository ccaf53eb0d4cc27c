import logging
import threading
from typing import Optional
from uuid import uuid4

import numpy as np

from cinegrade.grading.session import GradeSession

logger = logging.getLogger(__name__)


class SessionEntry:
    """One uploaded source image with its grade history.

    Preview renders are memoised per (source key, view, active version) and
    dropped whenever the source image changes.
    """

    def __init__(self, session_id: str, source: np.ndarray):
        self.session_id = session_id
        self.source = source
        self.session = GradeSession(source_key=uuid4().hex)
        # Only one AI generation request may be in flight per session
        self.generation_lock = threading.Lock()
        self._preview_cache: dict[tuple, bytes] = {}
        self._cache_lock = threading.Lock()

    def replace_source(self, source: np.ndarray) -> None:
        """Swap the source image; the whole history is discarded."""
        with self._cache_lock:
            self.source = source
            self.session.replace_source(uuid4().hex)
            self._preview_cache.clear()

    def snapshot(self) -> tuple[str, np.ndarray]:
        """Current (source_key, source) pair, read together."""
        with self._cache_lock:
            return self.session.source_key, self.source

    def cached_preview(self, key: tuple) -> Optional[bytes]:
        with self._cache_lock:
            return self._preview_cache.get(key)

    def store_preview(self, key: tuple, data: bytes) -> bool:
        """Memoise a render. Keys start with the source_key they were rendered from;
        renders of a replaced source are dropped.
        """
        with self._cache_lock:
            if key[0] != self.session.source_key:
                return False
            self._preview_cache[key] = data
            return True


class SessionStore:
    """In-memory session registry. Nothing survives a restart."""

    def __init__(self):
        self._entries: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def create(self, source: np.ndarray) -> SessionEntry:
        entry = SessionEntry(uuid4().hex, source)
        with self._lock:
            self._entries[entry.session_id] = entry
        logger.info(f"Created session {entry.session_id} ({source.shape[1]}x{source.shape[0]})")
        return entry

    def get(self, session_id: str) -> Optional[SessionEntry]:
        with self._lock:
            return self._entries.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            entry = self._entries.pop(session_id, None)
        if entry is None:
            return False
        entry.session.clear()
        logger.info(f"Deleted session {session_id}")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Singleton instance
store = SessionStore()
