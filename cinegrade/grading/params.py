"""색 보정 파라미터 레코드.

AI 서비스 응답처럼 동적으로 들어오는 값을 검증된 불변 레코드로 고정한다.
범위를 벗어난 값은 거부하지 않고 생성 시점에 clamp 하므로,
파일 출력이나 프리뷰까지 범위 밖 값이 전달되는 일은 없다.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from cinegrade.constants import NEUTRAL_GRAY

RGB = tuple[float, float, float]

# 필드별 (최솟값, 최댓값, 중립값)
CONTRAST_RANGE = (-1.0, 1.0, 0.0)
SATURATION_RANGE = (0.0, 2.0, 1.0)
TEMPERATURE_RANGE = (-1.0, 1.0, 0.0)
TINT_RANGE = (-1.0, 1.0, 0.0)


def clamp_scalar(value: Any, bounds: tuple[float, float, float]) -> float:
    """스칼라 값을 범위 안으로 clamp. 숫자가 아니거나 NaN/inf이면 중립값."""
    lo, hi, neutral = bounds
    try:
        v = float(value)
    except (TypeError, ValueError):
        return neutral
    if not math.isfinite(v):
        return neutral
    return min(max(v, lo), hi)


def clamp_color(value: Any) -> RGB:
    """RGB 톤 색상을 [0, 1]^3 으로 clamp. 3채널이 아니면 중립 회색."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return NEUTRAL_GRAY
    channels = list(value)
    if len(channels) != 3:
        return NEUTRAL_GRAY
    return tuple(clamp_scalar(c, (0.0, 1.0, 0.5)) for c in channels)  # type: ignore[return-value]


@dataclass(frozen=True)
class GradeParameters:
    """
    One generated colour grade.

    Attributes:
        contrast: 중간 회색(0.5) 기준 대비, [-1, 1], 0 = 변화 없음
        saturation: 채도 배율, [0, 2], 1 = 변화 없음
        temperature: 색온도, [-1 (cool), 1 (warm)]
        tint: 색조, [-1 (green), 1 (magenta)]
        shadow_color: 암부 스플릿 토닝 색, (0.5, 0.5, 0.5) = 중립
        highlight_color: 명부 스플릿 토닝 색, (0.5, 0.5, 0.5) = 중립
        description: AI가 작성한 설명 (실패 시 실패 사유)
    """

    contrast: float = 0.0
    saturation: float = 1.0
    temperature: float = 0.0
    tint: float = 0.0
    shadow_color: RGB = NEUTRAL_GRAY
    highlight_color: RGB = NEUTRAL_GRAY
    description: str = field(default="", compare=False)

    def __post_init__(self):
        # frozen dataclass이므로 object.__setattr__로 정규화
        object.__setattr__(self, "contrast", clamp_scalar(self.contrast, CONTRAST_RANGE))
        object.__setattr__(self, "saturation", clamp_scalar(self.saturation, SATURATION_RANGE))
        object.__setattr__(self, "temperature", clamp_scalar(self.temperature, TEMPERATURE_RANGE))
        object.__setattr__(self, "tint", clamp_scalar(self.tint, TINT_RANGE))
        object.__setattr__(self, "shadow_color", clamp_color(self.shadow_color))
        object.__setattr__(self, "highlight_color", clamp_color(self.highlight_color))
        object.__setattr__(self, "description", str(self.description or ""))

    @classmethod
    def neutral(cls, description: str = "") -> "GradeParameters":
        """항등 변환 파라미터."""
        return cls(description=description)

    @classmethod
    def fallback(cls, message: str) -> "GradeParameters":
        """생성 실패 시 사용하는 중립 파라미터 (description에 실패 사유)."""
        return cls.neutral(description=message)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GradeParameters":
        """dict에서 생성. snake_case와 AI 응답의 camelCase 키를 모두 받는다."""
        return cls(
            contrast=data.get("contrast", CONTRAST_RANGE[2]),
            saturation=data.get("saturation", SATURATION_RANGE[2]),
            temperature=data.get("temperature", TEMPERATURE_RANGE[2]),
            tint=data.get("tint", TINT_RANGE[2]),
            shadow_color=data.get("shadow_color", data.get("shadowsColor", NEUTRAL_GRAY)),
            highlight_color=data.get(
                "highlight_color", data.get("highlightsColor", NEUTRAL_GRAY)
            ),
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "contrast": self.contrast,
            "saturation": self.saturation,
            "temperature": self.temperature,
            "tint": self.tint,
            "shadow_color": list(self.shadow_color),
            "highlight_color": list(self.highlight_color),
            "description": self.description,
        }

    @property
    def is_identity(self) -> bool:
        """모든 수치 필드가 중립값인지 여부."""
        return (
            self.contrast == CONTRAST_RANGE[2]
            and self.saturation == SATURATION_RANGE[2]
            and self.temperature == TEMPERATURE_RANGE[2]
            and self.tint == TINT_RANGE[2]
            and self.shadow_color == NEUTRAL_GRAY
            and self.highlight_color == NEUTRAL_GRAY
        )
