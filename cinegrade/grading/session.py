"""그레이딩 세션 / 버전 히스토리.

소스 이미지 하나에 대해 생성된 GradeParameters를 불변 버전으로 쌓는다.
버전은 생성 후 수정/재정렬되지 않으며, "활성 버전"은 포인터일 뿐이다.
소스 이미지가 바뀌면 히스토리 전체를 버린다.

append / set_active / clear 는 락으로 직렬화한다 (단일 writer).
"""

from __future__ import annotations

import logging
import re
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from cinegrade.constants import (
    DEFAULT_DISPLAY_BASE,
    DISPLAY_NAME_MAX_LENGTH,
    REFERENCE_DISPLAY_BASE,
    REFERENCE_PROVENANCE,
)
from cinegrade.errors import InvalidSessionStateError
from cinegrade.grading.params import GradeParameters

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


class GradingMode(str, Enum):
    """그레이드 생성 방식."""

    PROMPT = "prompt"
    REFERENCE = "reference"


def make_display_name(mode: GradingMode, prompt: str, version: int) -> str:
    """버전 표시 이름 생성.

    prompt 모드: 구두점 제거 -> 공백을 "_"로 -> 20자 제한 -> "_v<k>" 접미사.
    reference 모드: "Ref_Match_v<k>".

    Example:
        >>> make_display_name(GradingMode.PROMPT, "Warm, vintage  film!", 3)
        'Warm_vintage_film_v3'
    """
    base = DEFAULT_DISPLAY_BASE
    if mode == GradingMode.PROMPT and prompt and prompt.strip():
        cleaned = _NON_WORD.sub("", prompt.strip())
        cleaned = _WHITESPACE.sub("_", cleaned.strip())
        if cleaned:
            base = cleaned[:DISPLAY_NAME_MAX_LENGTH]
    elif mode == GradingMode.REFERENCE:
        base = REFERENCE_DISPLAY_BASE
    return f"{base}_v{version}"


@dataclass(frozen=True)
class GradeVersion:
    """
    Immutable history entry.

    Attributes:
        id: 세션 내 단조 증가 id (clear 이후에도 재사용되지 않음)
        created_at: 생성 시각 (epoch 초, 세션 내 비감소)
        provenance: 사용된 프롬프트 또는 "Reference Match"
        mode: 생성 방식
        display_name: 파생 표시 이름 (export 기본 파일명)
        params: 색 보정 파라미터
    """

    id: int
    created_at: float
    provenance: str
    mode: GradingMode
    display_name: str
    params: GradeParameters


class GradeSession:
    """소스 이미지 하나에 묶인 버전 히스토리 (최신순)."""

    def __init__(self, source_key: Optional[str] = None) -> None:
        self.source_key = source_key
        self._versions: list[GradeVersion] = []  # 최신 버전이 앞
        self._by_id: dict[int, GradeVersion] = {}
        self._active_id: Optional[int] = None
        self._next_id = 1
        self._last_timestamp = 0.0
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._versions)

    def __iter__(self) -> Iterator[GradeVersion]:
        return iter(self.versions)

    def __contains__(self, version_id: object) -> bool:
        return version_id in self._by_id

    @property
    def versions(self) -> list[GradeVersion]:
        """버전 스냅샷 (최신순)."""
        with self._lock:
            return list(self._versions)

    @property
    def active_id(self) -> Optional[int]:
        return self._active_id

    def get(self, version_id: int) -> Optional[GradeVersion]:
        return self._by_id.get(version_id)

    def require_version(self, version_id: int) -> GradeVersion:
        version = self._by_id.get(version_id)
        if version is None:
            raise InvalidSessionStateError(f"알 수 없는 버전 id: {version_id}")
        return version

    def active_version(self) -> Optional[GradeVersion]:
        with self._lock:
            if self._active_id is None:
                return None
            return self._by_id.get(self._active_id)

    def require_active(self) -> GradeVersion:
        """활성 버전 반환. 없으면 InvalidSessionStateError."""
        version = self.active_version()
        if version is None:
            raise InvalidSessionStateError("활성 버전이 없습니다. 먼저 그레이드를 생성하세요.")
        return version

    # ------------------------------------------------------------------
    # 변경 (락으로 직렬화)
    # ------------------------------------------------------------------

    def append(
        self,
        params: GradeParameters,
        provenance: str,
        mode: GradingMode = GradingMode.PROMPT,
    ) -> GradeVersion:
        """새 버전 추가 후 활성화. 항상 성공한다."""
        mode = GradingMode(mode)
        if mode == GradingMode.REFERENCE and not provenance:
            provenance = REFERENCE_PROVENANCE

        with self._lock:
            # 벽시계가 뒤로 가도 created_at은 감소하지 않음
            now = max(time.time(), self._last_timestamp)
            self._last_timestamp = now

            version = GradeVersion(
                id=self._next_id,
                created_at=now,
                provenance=provenance,
                mode=mode,
                display_name=make_display_name(mode, provenance, len(self._versions) + 1),
                params=params,
            )
            self._next_id += 1
            self._versions.insert(0, version)
            self._by_id[version.id] = version
            self._active_id = version.id

        logger.info(f"버전 추가: {version.display_name} (id={version.id})")
        return version

    def set_active(self, version_id: int) -> bool:
        """활성 버전 변경. 알 수 없는 id이면 아무것도 하지 않고 False."""
        with self._lock:
            if version_id not in self._by_id:
                logger.debug(f"set_active 무시: 알 수 없는 id {version_id}")
                return False
            self._active_id = version_id
            return True

    def clear(self) -> None:
        """모든 버전 삭제. id 카운터는 유지한다."""
        with self._lock:
            self._versions.clear()
            self._by_id.clear()
            self._active_id = None

    def replace_source(self, source_key: Optional[str]) -> None:
        """소스 이미지 교체. 이전 소스 기준 버전은 모두 버린다."""
        with self._lock:
            self.source_key = source_key
            self._versions.clear()
            self._by_id.clear()
            self._active_id = None
        logger.info(f"소스 교체로 히스토리 초기화: {source_key}")
