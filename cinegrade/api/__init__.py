"""AI 그레이딩 서비스 연동 패키지."""

from cinegrade.api.grading_client import (
    GradeRequest,
    GradingClient,
    GradingResponse,
    Language,
)

__all__ = [
    "GradeRequest",
    "GradingClient",
    "GradingResponse",
    "Language",
]
