"""
Error taxonomy and the JSON error envelope.

Services raise ``BibleAPIError`` subclasses for expected failures (unknown
book, missing translation, verse out of range). Routers translate them to
``ApiError`` with an HTTP status; the handlers registered here render every
error as::

    {"error": {"code": "VERSE_NOT_FOUND", "message": "Verse 99 not found"}}
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .utils.logging import get_logger

logger = get_logger(__name__)


class BibleAPIError(Exception):
    """Base class for expected domain failures."""

    code = "NOT_FOUND"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TranslationNotFoundError(BibleAPIError):
    code = "TRANSLATION_NOT_FOUND"


class BookNotFoundError(BibleAPIError):
    code = "BOOK_NOT_FOUND"


class ChapterNotFoundError(BibleAPIError):
    code = "CHAPTER_NOT_FOUND"


class VerseNotFoundError(BibleAPIError):
    code = "VERSE_NOT_FOUND"


class InvalidReferenceError(BibleAPIError):
    code = "INVALID_REFERENCE"


class MissingParameterError(BibleAPIError):
    code = "MISSING_PARAMETER"


class ApiError(Exception):
    """HTTP-level error carrying status, code and client-facing message."""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message

    @classmethod
    def from_domain(cls, exc: BibleAPIError, status_code: int) -> ApiError:
        return cls(status_code, exc.code, exc.message)


def error_payload(code: str, message: str) -> dict[str, dict[str, str]]:
    return {"error": {"code": code, "message": message}}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_payload(code, message))


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(404, "NOT_FOUND", "Endpoint not found")
    if exc.status_code == 405:
        return error_response(405, "METHOD_NOT_ALLOWED", "Method not allowed")
    return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "query")
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return error_response(400, "INVALID_QUERY", "; ".join(problems) or "Invalid query")


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_error",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "path": request.url.path,
            "method": request.method,
        },
    )
    return error_response(500, "INTERNAL_ERROR", "An internal server error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on ``app``."""
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


__all__ = [
    "ApiError",
    "BibleAPIError",
    "BookNotFoundError",
    "ChapterNotFoundError",
    "InvalidReferenceError",
    "MissingParameterError",
    "TranslationNotFoundError",
    "VerseNotFoundError",
    "error_payload",
    "error_response",
    "register_exception_handlers",
]
