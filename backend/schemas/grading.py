from pydantic import BaseModel, Field
from datetime import datetime

from cinegrade.api.grading_client import Language
from cinegrade.grading.session import GradeVersion, GradingMode


class GradeParamsSchema(BaseModel):
    contrast: float
    saturation: float
    temperature: float
    tint: float
    shadow_color: list[float]
    highlight_color: list[float]
    description: str = ""

    class Config:
        from_attributes = True


class GradeCreateRequest(BaseModel):
    mode: GradingMode = GradingMode.PROMPT
    prompt: str | None = None
    reference_image: str | None = Field(
        default=None, description="Reference image as a data URL or base64 string"
    )
    language: Language | None = None

    class Config:
        json_schema_extra = {
            "example": {
                "mode": "prompt",
                "prompt": "Warm vintage film, soft highlights",
                "language": "en",
            }
        }


class VersionResponse(BaseModel):
    version_id: int = Field(alias="id")
    display_name: str
    provenance: str
    mode: GradingMode
    created_at: datetime
    params: GradeParamsSchema

    class Config:
        from_attributes = True
        populate_by_name = True

    @classmethod
    def from_version(cls, version: GradeVersion) -> "VersionResponse":
        return cls.model_validate(version, from_attributes=True)


class HistoryResponse(BaseModel):
    active_id: int | None = None
    items: list[VersionResponse]


class ActivateRequest(BaseModel):
    version_id: int


class SuggestionRequest(BaseModel):
    language: Language | None = None


class SuggestionResponse(BaseModel):
    suggestions: list[str]
