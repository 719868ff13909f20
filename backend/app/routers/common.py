"""Helpers shared by the routers: domain error to HTTP status mapping."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from ..errors import (
    ApiError,
    BibleAPIError,
    InvalidReferenceError,
    MissingParameterError,
)
from ..models import ErrorResponse

_BAD_REQUEST = (InvalidReferenceError, MissingParameterError)

# OpenAPI documentation of the error envelope
ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Invalid reference or query"},
    404: {"model": ErrorResponse, "description": "Book, chapter, verse or translation not found"},
}


def status_for(exc: BibleAPIError) -> int:
    """400 for bad client input, 404 for everything addressing absent data."""
    return 400 if isinstance(exc, _BAD_REQUEST) else 404


@contextmanager
def domain_errors() -> Iterator[None]:
    """Re-raise domain failures from the service layer as ``ApiError``."""
    try:
        yield
    except BibleAPIError as exc:
        raise ApiError.from_domain(exc, status_for(exc)) from None


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated query value, dropping blank entries."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
