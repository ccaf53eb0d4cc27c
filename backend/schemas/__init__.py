from .grading import (
    ActivateRequest,
    GradeCreateRequest,
    GradeParamsSchema,
    HistoryResponse,
    SuggestionRequest,
    SuggestionResponse,
    VersionResponse,
)
from .session import SessionResponse

__all__ = [
    "ActivateRequest",
    "GradeCreateRequest",
    "GradeParamsSchema",
    "HistoryResponse",
    "SuggestionRequest",
    "SuggestionResponse",
    "VersionResponse",
    "SessionResponse",
]
