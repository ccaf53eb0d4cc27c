"""Hald 스타일 래스터 LUT 생성 및 디코딩.

N^3 개 그리드 샘플을 한 변 E = ceil(sqrt(N^3)) 인 정사각형 이미지에
행 우선(row-major)으로 배치한다. 픽셀 인덱스 p = y * E + x 는

    r = p % N
    g = (p // N) % N
    b = p // N^2

로 그리드 좌표를 복원하며, .cube 데이터 행 순서와 동일하다.
p >= N^3 인 꼬리 픽셀은 패딩이며 항상 검정(0, 0, 0)으로 채운다.
"""

import io
import logging
import math

import numpy as np
from PIL import Image as PILImage

from cinegrade.errors import LutSerializationError
from cinegrade.grading.params import GradeParameters
from cinegrade.utils.lut import lut_to_rows, rows_to_lut, sample_grade_lut, validate_grid_size

logger = logging.getLogger(__name__)


def hald_edge(grid_size: int) -> int:
    """래스터 한 변의 길이 E = ceil(sqrt(N^3))."""
    n3 = grid_size**3
    edge = math.isqrt(n3)
    if edge * edge < n3:
        edge += 1
    return edge


def decode_pixel_index(p: int, grid_size: int) -> tuple[int, int, int]:
    """픽셀 인덱스 -> 그리드 좌표 (r, g, b).

    Raises:
        ValueError: 패딩 픽셀 (p >= N^3) 이거나 음수일 때
    """
    if not 0 <= p < grid_size**3:
        raise ValueError(f"패딩 또는 범위 밖 픽셀 인덱스: {p} (N={grid_size})")
    return p % grid_size, (p // grid_size) % grid_size, p // (grid_size * grid_size)


def encode_grid_index(r: int, g: int, b: int, grid_size: int) -> int:
    """그리드 좌표 (r, g, b) -> 픽셀 인덱스. decode_pixel_index의 역함수."""
    for name, v in (("r", r), ("g", g), ("b", b)):
        if not 0 <= v < grid_size:
            raise ValueError(f"그리드 좌표 {name}={v} 범위 밖 (N={grid_size})")
    return r + g * grid_size + b * grid_size * grid_size


def pixel_position(p: int, grid_size: int) -> tuple[int, int]:
    """픽셀 인덱스 -> 이미지 좌표 (x, y)."""
    edge = hald_edge(grid_size)
    return p % edge, p // edge


def quantize(values: np.ndarray) -> np.ndarray:
    """[0, 1] float -> uint8 (반올림)."""
    return (np.clip(values, 0.0, 1.0) * 255.0).round().astype(np.uint8)


def generate_hald_lut(params: GradeParameters, grid_size: int) -> np.ndarray:
    """그레이드를 샘플링한 Hald 래스터 생성.

    Args:
        params: 색 보정 파라미터
        grid_size: LUT 그리드 크기 N

    Returns:
        Hald 이미지 [E, E, 3], uint8
    """
    grid_size = validate_grid_size(grid_size)
    edge = hald_edge(grid_size)

    rows = quantize(lut_to_rows(sample_grade_lut(params, grid_size)))  # [N^3, 3]

    flat = np.zeros((edge * edge, 3), dtype=np.uint8)  # 패딩 = 검정
    flat[: rows.shape[0]] = rows
    return flat.reshape(edge, edge, 3)


def serialize_hald(params: GradeParameters, grid_size: int) -> bytes:
    """Hald 래스터를 PNG 바이트로 인코딩.

    Raises:
        LutSerializationError: 그리드 크기가 지원 범위 밖이거나 PNG 인코딩 실패
    """
    hald = generate_hald_lut(params, grid_size)
    buffer = io.BytesIO()
    try:
        PILImage.fromarray(hald).save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise LutSerializationError(f"Hald PNG 인코딩 실패: {exc}") from exc
    return buffer.getvalue()


def extract_lut_from_hald(hald: np.ndarray, grid_size: int) -> np.ndarray:
    """Hald 래스터에서 3D LUT 복원 (패딩 픽셀 무시).

    Args:
        hald: Hald 이미지 [E, E, 3], uint8
        grid_size: LUT 그리드 크기 N

    Returns:
        3D LUT [N, N, N, 3], float32, 범위 [0, 1] ([r, g, b] 인덱싱)
    """
    hald = np.asarray(hald)
    edge = hald_edge(grid_size)
    if hald.shape[:2] != (edge, edge) or hald.ndim != 3 or hald.shape[2] < 3:
        raise ValueError(
            f"Hald 이미지 크기 불일치: 예상 ({edge}, {edge}, 3), 실제 {hald.shape}"
        )

    flat = hald[..., :3].reshape(edge * edge, 3)[: grid_size**3]
    values = flat.astype(np.float32) / 255.0
    return rows_to_lut(values, grid_size)
