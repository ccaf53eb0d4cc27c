from pydantic import BaseModel


class SessionResponse(BaseModel):
    session_id: str
    width: int
    height: int
    version_count: int = 0
    active_id: int | None = None

    class Config:
        json_schema_extra = {
            "example": {
                "session_id": "3f2b9c0e8d2a4c5f9a1b7e6d5c4b3a21",
                "width": 1920,
                "height": 1080,
                "version_count": 2,
                "active_id": 2,
            }
        }
