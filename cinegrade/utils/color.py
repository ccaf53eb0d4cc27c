"""색공간 변환 유틸리티.

휘도 계산, sRGB -> CIE Lab 변환, ΔE 계산 (NumPy).
"""

import numpy as np

from cinegrade.constants import LUMA_B, LUMA_G, LUMA_R

# D65 조명 기준 백색점
D65_WHITE = np.array([0.95047, 1.00000, 1.08883], dtype=np.float64)

# sRGB -> XYZ (D65) 변환 행렬
_RGB_TO_XYZ_MAT = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Rec.709 휘도 Y = 0.2126R + 0.7152G + 0.0722B.

    Args:
        rgb: RGB 값, shape [..., 3]

    Returns:
        휘도, shape [...]
    """
    return LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]


def _srgb_to_linear(x: np.ndarray) -> np.ndarray:
    """sRGB 감마 디코딩."""
    x = np.clip(x, 0.0, 1.0)
    return np.where(x <= 0.04045, x / 12.92, ((x + 0.055) / 1.055) ** 2.4)


def _lab_f(t: np.ndarray) -> np.ndarray:
    """CIE Lab의 비선형 f(t) 함수."""
    delta = 6.0 / 29.0
    return np.where(t > delta**3, np.cbrt(t.clip(1e-12)), t / (3.0 * delta**2) + 4.0 / 29.0)


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """sRGB -> CIE Lab 변환 (D65 기준).

    Args:
        rgb: sRGB 값, shape [..., 3], 범위 [0, 1]

    Returns:
        Lab 값: L [0, 100], a, b
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    xyz = _srgb_to_linear(rgb) @ _RGB_TO_XYZ_MAT.T
    f = _lab_f(xyz / D65_WHITE)
    L = 116.0 * f[..., 1] - 16.0
    a = 500.0 * (f[..., 0] - f[..., 1])
    b = 200.0 * (f[..., 1] - f[..., 2])
    return np.stack([L, a, b], axis=-1)


def mean_delta_e(image_a: np.ndarray, image_b: np.ndarray) -> float:
    """두 이미지 사이의 평균 CIE76 ΔE.

    uint8 입력은 [0, 1]로 정규화한다. 그레이드가 얼마나 강하게 적용됐는지
    로그로 남길 때 사용한다.
    """
    a = np.asarray(image_a)
    b = np.asarray(image_b)
    if a.shape != b.shape:
        raise ValueError(f"이미지 shape 불일치: {a.shape} vs {b.shape}")
    if a.dtype == np.uint8:
        a = a.astype(np.float64) / 255.0
    if b.dtype == np.uint8:
        b = b.astype(np.float64) / 255.0
    diff = rgb_to_lab(a) - rgb_to_lab(b)
    return float(np.sqrt((diff**2).sum(axis=-1)).mean())
