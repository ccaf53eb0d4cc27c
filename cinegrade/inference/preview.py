"""프리뷰 렌더링.

이미지의 모든 픽셀에 apply_grade를 적용한다. 큰 이미지는 먼저 긴 변을
max_edge 이하로 축소해 프레임당 비용을 제한한다.
행 단위 청크로 나눠 병렬 처리해도 결과는 직렬 처리와 동일하다.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from cinegrade.constants import PREVIEW_MAX_EDGE
from cinegrade.grading.params import GradeParameters
from cinegrade.grading.transform import apply_grade
from cinegrade.utils.io import downscale_to_max_edge, to_uint8

logger = logging.getLogger(__name__)

# 청크당 최소 행 수
_MIN_CHUNK_ROWS = 64


def _grade_rows(rows: np.ndarray, params: GradeParameters) -> np.ndarray:
    """uint8 행 블록 -> 그레이드 적용 uint8 행 블록."""
    graded = apply_grade(rows.astype(np.float64) / 255.0, params)
    return (graded * 255.0).round().astype(np.uint8)


def render_preview(
    image: np.ndarray,
    params: Optional[GradeParameters],
    max_edge: int = PREVIEW_MAX_EDGE,
    workers: int = 1,
) -> np.ndarray:
    """이미지에 그레이드 적용.

    Args:
        image: 입력 이미지 [H, W, 3], uint8 또는 float [0, 1]
        params: 색 보정 파라미터. None이면 축소만 수행 (Before 뷰)
        max_edge: 긴 변 상한 (px)
        workers: 병렬 스레드 수. 1이면 직렬 처리

    Returns:
        프리뷰 이미지 [H', W', 3], uint8
    """
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] < 3:
        raise ValueError(f"이미지 shape 오류: {image.shape}, [H, W, 3]이어야 함")

    source = downscale_to_max_edge(to_uint8(np.ascontiguousarray(image[..., :3])), max_edge)
    if params is None:
        return source

    height = source.shape[0]
    if workers <= 1 or height < 2 * _MIN_CHUNK_ROWS:
        return _grade_rows(source, params)

    chunk = max(_MIN_CHUNK_ROWS, -(-height // workers))
    bounds = [(start, min(start + chunk, height)) for start in range(0, height, chunk)]

    result = np.empty_like(source)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            (start, stop, pool.submit(_grade_rows, source[start:stop], params))
            for start, stop in bounds
        ]
        for start, stop, future in futures:
            result[start:stop] = future.result()

    logger.debug(f"프리뷰 렌더링: {source.shape[1]}x{height}, 청크 {len(bounds)}개")
    return result
