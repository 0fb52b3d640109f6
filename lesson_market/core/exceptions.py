import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lesson_market.core import logs

logger = logging.getLogger(__name__)


class LessonMarketError(Exception):
    """Base class for domain errors surfaced through the API."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(LessonMarketError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class InvalidTransitionError(LessonMarketError):
    """Status change not allowed from the current status."""

    status_code = status.HTTP_409_CONFLICT
    code = "INVALID_TRANSITION"


class CapacityError(LessonMarketError):
    """Capacity would drop below confirmed participants, or a slot is full."""

    status_code = status.HTTP_409_CONFLICT
    code = "CAPACITY"


class SlotUnavailableError(LessonMarketError):
    """Slot is not published or its booking deadline has passed."""

    status_code = status.HTTP_409_CONFLICT
    code = "SLOT_UNAVAILABLE"


def _error(status_code: int, code: str, message: str, details: list | None = None) -> JSONResponse:
    error: dict = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(LessonMarketError)
    async def domain_exception_handler(request: Request, exc: LessonMarketError) -> JSONResponse:
        return _error(exc.status_code, exc.code, exc.detail)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error(exc.status_code, f"HTTP_{exc.status_code}", exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Convert errors to JSON-serializable format
        errors = [{key: str(value) for key, value in error.items()} for error in exc.errors()]
        return _error(422, "VALIDATION_ERROR", "Request validation failed", errors)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(logs.UNHANDLED, request.method, request.url.path)
        return _error(500, "INTERNAL_ERROR", "An unexpected error occurred")
