"""Global error handlers: every error response is JSON `{"detail": ...}`."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sizemissions.missions.exceptions import (
    EventValidationError,
    InvalidTransitionError,
    MissionError,
    MissionNotFoundError,
    ProfileNotFoundError,
    StorageFailureError,
)

logger = structlog.get_logger()

# Fallback mapping for mission errors that escape a router
MISSION_ERROR_STATUS: dict[type[MissionError], int] = {
    MissionNotFoundError: 404,
    ProfileNotFoundError: 404,
    InvalidTransitionError: 409,
    EventValidationError: 400,
    StorageFailureError: 503,
}


def status_for(exc: MissionError) -> int:
    for exc_type, status in MISSION_ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            return status
    return 500


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": jsonable_errors(exc)},
        )

    @app.exception_handler(MissionError)
    async def mission_exception_handler(request: Request, exc: MissionError) -> JSONResponse:
        status = status_for(exc)
        logger.warning(
            "mission_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
            status=status,
        )
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may hold exception instances, which JSONResponse cannot serialize
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
