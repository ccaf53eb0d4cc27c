"""색 보정 파라미터, 변환, 세션 히스토리."""

from cinegrade.grading.params import GradeParameters
from cinegrade.grading.session import GradeSession, GradeVersion, GradingMode, make_display_name
from cinegrade.grading.transform import apply_grade, transform_rgb

__all__ = [
    "GradeParameters",
    "GradeSession",
    "GradeVersion",
    "GradingMode",
    "make_display_name",
    "apply_grade",
    "transform_rgb",
]
