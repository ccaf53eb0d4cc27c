"""색 보정 변환 (ColorTransform).

(RGB, GradeParameters) -> RGB 순수 함수. 프리뷰, .cube, Hald PNG 모두
이 모듈의 apply_grade 하나만 사용하므로 미리보기와 export 결과가 일치한다.

처리 순서 (각 단계는 이전 단계 결과에 적용):
    1. Contrast: 0.5 기준 피벗
    2. White balance: temperature(R/B), tint(G) 가산 바이어스
    3. Saturation: Rec.709 휘도 쪽으로 블렌딩
    4. Split toning: 휘도 가중치로 암부/명부에 톤 색 가산
    5. Clamp: [0, 1]

상태가 없으므로 여러 스레드에서 동시에 호출해도 안전하다.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from cinegrade.constants import SPLIT_TONE_STRENGTH, TEMPERATURE_SCALE, TINT_SCALE
from cinegrade.grading.params import GradeParameters
from cinegrade.utils.color import luminance


def _apply_contrast(rgb: np.ndarray, contrast: float) -> np.ndarray:
    if contrast == 0.0:
        return rgb
    return 0.5 + (rgb - 0.5) * (1.0 + contrast)


def _apply_white_balance(rgb: np.ndarray, temperature: float, tint: float) -> np.ndarray:
    if temperature == 0.0 and tint == 0.0:
        return rgb
    bias = np.array(
        [TEMPERATURE_SCALE * temperature, -TINT_SCALE * tint, -TEMPERATURE_SCALE * temperature],
        dtype=np.float64,
    )
    return rgb + bias


def _apply_saturation(rgb: np.ndarray, saturation: float) -> np.ndarray:
    if saturation == 1.0:
        return rgb
    y = luminance(rgb)[..., np.newaxis]
    return y + (rgb - y) * saturation


def _apply_split_toning(
    rgb: np.ndarray,
    shadow_color: Sequence[float],
    highlight_color: Sequence[float],
) -> np.ndarray:
    shadow_offset = np.asarray(shadow_color, dtype=np.float64) - 0.5
    highlight_offset = np.asarray(highlight_color, dtype=np.float64) - 0.5
    if not shadow_offset.any() and not highlight_offset.any():
        return rgb

    y = luminance(rgb)[..., np.newaxis]
    # 암부 가중치는 Y=0에서 1, Y=0.5에서 0. 명부는 대칭.
    w_shadow = np.clip(1.0 - 2.0 * y, 0.0, 1.0)
    w_highlight = np.clip(2.0 * y - 1.0, 0.0, 1.0)
    return rgb + SPLIT_TONE_STRENGTH * (shadow_offset * w_shadow + highlight_offset * w_highlight)


def apply_grade(pixels: np.ndarray, params: GradeParameters) -> np.ndarray:
    """RGB 배열에 색 보정 적용 (벡터화).

    Args:
        pixels: RGB 값, shape [..., 3], 범위 [0, 1] (float)
        params: 색 보정 파라미터

    Returns:
        보정된 RGB, 입력과 동일 shape, float64, 범위 [0, 1]
    """
    rgb = np.asarray(pixels, dtype=np.float64)
    if rgb.shape[-1] != 3:
        raise ValueError(f"마지막 축이 RGB(3)여야 함: {rgb.shape}")

    rgb = _apply_contrast(rgb, params.contrast)
    rgb = _apply_white_balance(rgb, params.temperature, params.tint)
    rgb = _apply_saturation(rgb, params.saturation)
    rgb = _apply_split_toning(rgb, params.shadow_color, params.highlight_color)

    # + 0.0 으로 -0.0 을 0.0 으로 정규화 (.cube 출력에 "-0.000000" 방지)
    return np.clip(rgb, 0.0, 1.0) + 0.0


def transform_rgb(
    rgb: Sequence[float], params: GradeParameters
) -> tuple[float, float, float]:
    """단일 RGB 값 변환.

    Example:
        >>> transform_rgb((0.25, 0.25, 0.25), GradeParameters(contrast=1.0))
        (0.0, 0.0, 0.0)
    """
    out = apply_grade(np.asarray(rgb, dtype=np.float64).reshape(1, 3), params)[0]
    return float(out[0]), float(out[1]), float(out[2])
