"""3D LUT 그리드 유틸리티.

항등 그리드 생성, 그레이드 샘플링, 파일 행 순서 변환, trilinear 적용.
LUT 배열은 항상 [r, g, b, 3] 인덱싱 (첫 번째 축이 R)을 사용한다.
"""

import numpy as np

from cinegrade.constants import MAX_GRID_SIZE, MIN_GRID_SIZE
from cinegrade.errors import LutSerializationError
from cinegrade.grading.params import GradeParameters
from cinegrade.grading.transform import apply_grade


def validate_grid_size(size: int) -> int:
    """그리드 크기 검증. 지원 범위 밖이면 LutSerializationError."""
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise LutSerializationError(f"그리드 크기는 정수여야 함: {size!r}")
    if not MIN_GRID_SIZE <= size <= MAX_GRID_SIZE:
        raise LutSerializationError(
            f"지원하지 않는 그리드 크기: {size} (허용 범위 [{MIN_GRID_SIZE}, {MAX_GRID_SIZE}])"
        )
    return int(size)


def create_identity_lut(size: int = 33) -> np.ndarray:
    """항등 LUT 생성 (입력 = 출력).

    Args:
        size: LUT 그리드 크기 (일반적으로 17, 33, 64)

    Returns:
        항등 3D LUT [size, size, size, 3], float64.
        identity[r, g, b] == (r, g, b) / (size - 1)
    """
    coords = np.linspace(0.0, 1.0, size, dtype=np.float64)
    r, g, b = np.meshgrid(coords, coords, coords, indexing="ij")
    return np.stack([r, g, b], axis=-1)


def sample_grade_lut(params: GradeParameters, size: int) -> np.ndarray:
    """항등 그리드에 그레이드를 적용한 LUT.

    Returns:
        [size, size, size, 3], float64, 범위 [0, 1]
    """
    size = validate_grid_size(size)
    return apply_grade(create_identity_lut(size), params)


def lut_to_rows(lut: np.ndarray) -> np.ndarray:
    """[r, g, b, 3] LUT -> 파일 행 순서 [N^3, 3].

    행 순서: B 가장 느림, G, R 가장 빠름. 행 i 의 격자 좌표는
    r = i % N, g = (i // N) % N, b = i // N^2.
    """
    size = lut.shape[0]
    return np.ascontiguousarray(lut.transpose(2, 1, 0, 3)).reshape(size**3, 3)


def rows_to_lut(rows: np.ndarray, size: int) -> np.ndarray:
    """lut_to_rows의 역변환: [N^3, 3] -> [r, g, b, 3]."""
    rows = np.asarray(rows)
    if rows.shape != (size**3, 3):
        raise ValueError(f"행 shape 오류: {rows.shape}, ({size**3}, 3)이어야 함")
    return np.ascontiguousarray(rows.reshape(size, size, size, 3).transpose(2, 1, 0, 3))


def apply_lut(
    image: np.ndarray,
    lut: np.ndarray,
) -> np.ndarray:
    """3D LUT를 이미지에 적용 (trilinear interpolation, NumPy).

    Args:
        image: 입력 이미지 [..., 3], float, 범위 [0, 1]
        lut: 3D LUT [size, size, size, 3]

    Returns:
        변환된 이미지, 입력과 동일 shape, float64
    """
    image = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    lut = np.asarray(lut, dtype=np.float64)

    size = lut.shape[0]
    scale = size - 1  # LUT 인덱스 스케일

    # 픽셀을 LUT 그리드 좌표로 변환
    coords = image * scale
    lo = np.floor(coords).astype(np.int64).clip(0, size - 2)  # 하한 인덱스
    hi = lo + 1  # 상한 인덱스

    # 보간 가중치
    d = coords - lo
    d_r = d[..., 0, np.newaxis]
    d_g = d[..., 1, np.newaxis]
    d_b = d[..., 2, np.newaxis]
    lo_r, lo_g, lo_b = lo[..., 0], lo[..., 1], lo[..., 2]
    hi_r, hi_g, hi_b = hi[..., 0], hi[..., 1], hi[..., 2]

    # 8개 꼭짓점의 LUT 값 조회 (R, G, B 순서)
    c000 = lut[lo_r, lo_g, lo_b]
    c001 = lut[lo_r, lo_g, hi_b]
    c010 = lut[lo_r, hi_g, lo_b]
    c011 = lut[lo_r, hi_g, hi_b]
    c100 = lut[hi_r, lo_g, lo_b]
    c101 = lut[hi_r, lo_g, hi_b]
    c110 = lut[hi_r, hi_g, lo_b]
    c111 = lut[hi_r, hi_g, hi_b]

    c00 = c000 * (1 - d_b) + c001 * d_b
    c01 = c010 * (1 - d_b) + c011 * d_b
    c10 = c100 * (1 - d_b) + c101 * d_b
    c11 = c110 * (1 - d_b) + c111 * d_b

    c0 = c00 * (1 - d_g) + c01 * d_g
    c1 = c10 * (1 - d_g) + c11 * d_g

    result = c0 * (1 - d_r) + c1 * d_r
    return result.clip(0.0, 1.0)
