import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from backend.core.config import settings
from backend.api.dependencies import get_grading_client
from backend.api.v1 import router as v1_router
from cinegrade.errors import InvalidSessionStateError, LutSerializationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    yield
    # Shutdown
    get_grading_client().close()
    get_grading_client.cache_clear()


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(v1_router)


@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "ok"}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


@app.exception_handler(LutSerializationError)
async def lut_serialization_handler(request: Request, exc: LutSerializationError):
    logger.warning(f"LUT export failed: {exc.message}")
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "EXPORT_FAILED", exc.message)


@app.exception_handler(InvalidSessionStateError)
async def invalid_state_handler(request: Request, exc: InvalidSessionStateError):
    return error_response(status.HTTP_409_CONFLICT, "INVALID_STATE", exc.message)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
