"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response

from ..config import settings
from ..errors import ApiError
from ..utils.metrics import metrics_response

router = APIRouter(tags=["monitoring"])


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    if not settings.METRICS_ENABLED:
        raise ApiError(404, "NOT_FOUND", "Endpoint not found")
    payload, content_type = metrics_response()
    return Response(content=payload, media_type=content_type)
