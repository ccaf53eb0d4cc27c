"""LUT export 유틸리티.

활성 그레이드를 .cube (텍스트) 또는 Hald PNG (래스터) 로 변환한다.
두 포맷 모두 같은 그리드 크기와 같은 apply_grade 샘플링을 사용한다.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from cinegrade.constants import DEFAULT_GRID_SIZE
from cinegrade.data.cube_parser import CubeParser
from cinegrade.data.hald import serialize_hald
from cinegrade.errors import LutSerializationError
from cinegrade.grading.params import GradeParameters
from cinegrade.utils.lut import sample_grade_lut

logger = logging.getLogger(__name__)


class LutFormat(str, Enum):
    """지원 export 포맷."""

    CUBE = "cube"
    PNG = "png"  # Hald 스타일 래스터 LUT

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def media_type(self) -> str:
        return "text/plain" if self is LutFormat.CUBE else "image/png"


@dataclass(frozen=True)
class ExportResult:
    """직렬화된 LUT 파일."""

    filename: str
    content: bytes
    media_type: str
    format: LutFormat


def parse_format(value: "str | LutFormat") -> LutFormat:
    """문자열 -> LutFormat. 지원하지 않는 포맷이면 LutSerializationError."""
    if isinstance(value, LutFormat):
        return value
    try:
        return LutFormat(str(value).lower().lstrip("."))
    except ValueError as exc:
        supported = ", ".join(f.value for f in LutFormat)
        raise LutSerializationError(
            f"지원하지 않는 LUT 포맷: {value!r} (지원: {supported})"
        ) from exc


def ensure_extension(filename: str, fmt: "str | LutFormat") -> str:
    """파일명에 포맷 확장자가 없으면 붙인다.

    Example:
        >>> ensure_extension("Warm_Look_v1", "cube")
        'Warm_Look_v1.cube'
    """
    fmt = parse_format(fmt)
    name = filename.strip() or "CineGrade"
    if not name.lower().endswith(fmt.extension):
        name += fmt.extension
    return name


def serialize_cube(
    params: GradeParameters,
    name: str,
    grid_size: int = DEFAULT_GRID_SIZE,
) -> str:
    """그레이드를 .cube 텍스트로 직렬화.

    Args:
        params: 색 보정 파라미터
        name: LUT 제목 (TITLE 헤더)
        grid_size: LUT 그리드 크기 N

    Returns:
        헤더 + N^3 개 데이터 행

    Raises:
        LutSerializationError: 그리드 크기가 지원 범위 밖일 때
    """
    lut = sample_grade_lut(params, grid_size)
    return CubeParser().dumps(lut, title=name)


def export_lut(
    params: GradeParameters,
    filename: str,
    fmt: "str | LutFormat" = LutFormat.CUBE,
    grid_size: int = DEFAULT_GRID_SIZE,
) -> ExportResult:
    """그레이드를 선택한 포맷의 파일 내용으로 변환.

    Args:
        params: 색 보정 파라미터
        filename: 출력 파일명 (확장자 없으면 자동 추가)
        fmt: "cube" 또는 "png"
        grid_size: LUT 그리드 크기 N

    Raises:
        LutSerializationError: 포맷/그리드 크기 미지원 또는 인코딩 실패.
            부분적으로 생성된 파일은 반환하지 않는다.
    """
    fmt = parse_format(fmt)
    full_name = ensure_extension(filename, fmt)

    if fmt is LutFormat.CUBE:
        title = full_name[: -len(fmt.extension)]
        content = serialize_cube(params, title, grid_size).encode("utf-8")
    else:
        content = serialize_hald(params, grid_size)

    logger.info(f"LUT export 완료: {full_name} ({fmt.value}, size={grid_size}, {len(content)} bytes)")
    return ExportResult(
        filename=full_name,
        content=content,
        media_type=fmt.media_type,
        format=fmt,
    )


def write_export(result: ExportResult, directory: str | Path) -> Path:
    """ExportResult를 디렉터리에 파일로 저장하고 경로 반환."""
    out_path = Path(directory) / result.filename
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(result.content)
    return out_path
