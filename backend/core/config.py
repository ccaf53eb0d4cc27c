from pydantic_settings import BaseSettings
from typing import Optional

from cinegrade.api.grading_client import Language


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    # API
    DEBUG: bool = False
    API_TITLE: str = "CineGrade API"
    API_VERSION: str = "0.1.0"
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # AI grading service
    GRADING_API_URL: Optional[str] = None
    GRADING_API_KEY: Optional[str] = None
    GRADING_TIMEOUT_S: float = 60.0
    DEFAULT_LANGUAGE: Language = Language.EN

    # LUT / preview
    LUT_GRID_SIZE: int = 33
    PREVIEW_MAX_EDGE: int = 2048
    PREVIEW_WORKERS: int = 4

    # Image upload
    MAX_UPLOAD_SIZE_MB: int = 50
    ALLOWED_IMAGE_TYPES: list[str] = [
        "image/jpeg",
        "image/png",
        "image/tiff",
        "image/webp",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
