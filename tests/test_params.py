"""GradeParameters 테스트."""

import math

import pytest

from cinegrade.grading.params import GradeParameters


class TestClamping:
    """범위 clamp 테스트."""

    def test_out_of_range_values_clamped(self):
        """범위 밖 값은 경계로 clamp."""
        p = GradeParameters(contrast=5.0, saturation=-1.0, temperature=-3.0, tint=2.0)
        assert p.contrast == 1.0
        assert p.saturation == 0.0
        assert p.temperature == -1.0
        assert p.tint == 1.0

    def test_colors_clamped(self):
        """톤 색상 채널은 [0, 1]."""
        p = GradeParameters(shadow_color=(1.5, -0.2, 0.3))
        assert p.shadow_color == (1.0, 0.0, 0.3)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, "abc", None])
    def test_non_finite_becomes_neutral(self, bad):
        """NaN/inf/숫자가 아닌 값은 중립값."""
        p = GradeParameters(contrast=bad, saturation=bad)
        assert p.contrast == 0.0
        assert p.saturation == 1.0

    def test_wrong_channel_count_becomes_gray(self):
        """3채널이 아닌 색은 중립 회색."""
        p = GradeParameters(highlight_color=(1.0, 0.0))
        assert p.highlight_color == (0.5, 0.5, 0.5)


class TestConstruction:
    """생성자/변환 테스트."""

    def test_neutral_is_identity(self):
        assert GradeParameters.neutral().is_identity
        assert not GradeParameters(contrast=0.1).is_identity

    def test_fallback_carries_message(self):
        """fallback은 중립 + 실패 사유."""
        p = GradeParameters.fallback("Generation Failed: timeout")
        assert p.is_identity
        assert p.description == "Generation Failed: timeout"

    def test_from_mapping_camel_case(self):
        """AI 응답의 camelCase 키 지원."""
        p = GradeParameters.from_mapping(
            {
                "contrast": 0.2,
                "saturation": 1.3,
                "temperature": 0.4,
                "tint": -0.1,
                "shadowsColor": [0.4, 0.5, 0.6],
                "highlightsColor": [0.6, 0.5, 0.4],
                "description": "Warm",
            }
        )
        assert p.shadow_color == (0.4, 0.5, 0.6)
        assert p.highlight_color == (0.6, 0.5, 0.4)
        assert p.description == "Warm"

    def test_to_dict_roundtrip(self):
        p = GradeParameters(contrast=0.3, shadow_color=(0.2, 0.3, 0.4), description="x")
        assert GradeParameters.from_mapping(p.to_dict()) == p

    def test_description_not_compared(self):
        """동등성 비교는 수치 필드만 사용."""
        assert GradeParameters(description="a") == GradeParameters(description="b")

    def test_immutable(self):
        p = GradeParameters()
        with pytest.raises(AttributeError):
            p.contrast = 0.5
