"""
Substring search router.

Example Usage:
    ```bash
    curl "http://localhost:8000/search?q=love&limit=5&offset=5"
    curl "http://localhost:8000/search?q=lumi%C3%A8re&language=fr"
    ```
"""

from fastapi import APIRouter, Depends, Query

from ..config import settings
from ..dependencies.services import get_search_service
from ..errors import ApiError
from ..models import SearchResponse
from ..repositories.search import MAX_OFFSET
from ..services.search import SearchService
from .common import ERROR_RESPONSES, domain_errors

router = APIRouter(prefix="/search", tags=["search"], responses=ERROR_RESPONSES)


@router.get("", response_model=SearchResponse)
async def search_verses(
    q: str | None = Query(None, description="Text to find anywhere in a verse"),
    language: str | None = Query(None, description="Language for book names and default translation"),
    translation: str | None = Query(None, description="Translation id (e.g., en-kjv)"),
    limit: int | None = Query(None, description="Page size, default 10, capped at 100"),
    offset: int | None = Query(None, description="Results to skip, default 0"),
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Case-insensitive substring search with highlighted matches.

    ``total`` counts every match regardless of ``limit``/``offset``.
    Regex or SQL wildcard characters in ``q`` are matched literally.

    Response:
        ```json
        {
          "query": "love", "translation": "en-kjv", "language": "en",
          "total": 2, "limit": 10, "offset": 0,
          "results": [
            {"reference": "1 John 4:19", "book": {"id": "1jn", "name": "1 John"},
             "chapter": 4, "verse": 19,
             "text": "We love him, because he first loved us.",
             "highlight": "We <em>love</em> him, because he first <em>love</em>d us."}
          ]
        }
        ```

    Raises:
        MISSING_QUERY (400): ``q`` absent or empty
        INVALID_QUERY (400): ``limit`` < 1, or ``offset`` negative or above ``MAX_OFFSET``
        TRANSLATION_NOT_FOUND (404): No translation resolves
    """
    if not q:
        raise ApiError(400, "MISSING_QUERY", "Missing q query parameter")

    page_size = settings.SEARCH_DEFAULT_LIMIT if limit is None else limit
    if page_size < 1:
        raise ApiError(400, "INVALID_QUERY", "limit must be at least 1")
    page_size = min(page_size, settings.SEARCH_MAX_LIMIT)

    start = 0 if offset is None else offset
    if start < 0:
        raise ApiError(400, "INVALID_QUERY", "offset must not be negative")
    if start > MAX_OFFSET:
        raise ApiError(400, "INVALID_QUERY", f"offset must not exceed {MAX_OFFSET}")

    with domain_errors():
        return await service.search(
            q,
            language=language or settings.DEFAULT_LANGUAGE,
            translation=translation,
            limit=page_size,
            offset=start,
        )
