"""
Verse retrieval router.

Verses are addressed with dotted references: ``book.chapter.verse`` or
``book.chapter.start-end``. The book part accepts any catalog id or alias,
case-insensitively.

Example Usage:
    ```bash
    # Single verse
    curl http://localhost:8000/verses/jhn.3.16

    # Verse range, French book names
    curl "http://localhost:8000/verses/psa.23.1-6?language=fr"

    # Several references at once
    curl "http://localhost:8000/verses?refs=jhn.3.16,rom.8.28"

    # Same verse across translations
    curl "http://localhost:8000/verses/gen.1.1/compare?translations=en-kjv,fr-lsg"
    ```
"""

from fastapi import APIRouter, Depends, Query

from ..config import settings
from ..dependencies.services import get_verse_service
from ..errors import ApiError
from ..models import BatchVersesResponse, CompareResponse, PassageResponse, VerseResponse
from ..services.verses import VerseService
from .common import ERROR_RESPONSES, domain_errors, split_csv

router = APIRouter(prefix="/verses", tags=["verses"], responses=ERROR_RESPONSES)

LANGUAGE_QUERY = Query(None, description="Language for book names and default translation")
TRANSLATION_QUERY = Query(None, description="Translation id (e.g., en-kjv)")


# NOTE: the collection route and /{ref}/compare are declared before /{ref}


@router.get("", response_model=BatchVersesResponse)
async def get_verses(
    refs: str | None = Query(None, description="Comma-separated references"),
    language: str | None = LANGUAGE_QUERY,
    translation: str | None = TRANSLATION_QUERY,
    service: VerseService = Depends(get_verse_service),
) -> BatchVersesResponse:
    """
    Look up several references in one call, preserving input order.

    One malformed reference fails the whole request with
    ``INVALID_REFERENCE``; references with no stored verse are omitted.

    Response:
        ```json
        {
          "translation": "en-kjv",
          "language": "en",
          "verses": [
            {"reference": "John 3:16", "book": {"id": "jhn", "name": "John"},
             "chapter": 3, "verse": 16, "text": "For God so loved the world..."}
          ]
        }
        ```
    """
    if not refs or not refs.strip():
        raise ApiError(400, "MISSING_REFS", "Missing refs query parameter")
    with domain_errors():
        return await service.get_many(
            refs,
            language=language or settings.DEFAULT_LANGUAGE,
            translation=translation,
        )


@router.get("/{ref}/compare", response_model=CompareResponse)
async def compare_verse(
    ref: str,
    translations: str | None = Query(None, description="Comma-separated translation ids"),
    languages: str | None = Query(None, description="Comma-separated language codes"),
    service: VerseService = Depends(get_verse_service),
) -> CompareResponse:
    """
    Show one reference side by side in several translations or languages.

    ``translations`` wins when both are given. Unknown translations or
    languages, and those missing the verse, are left out of
    ``comparisons`` instead of failing the request.

    Raises:
        INVALID_REFERENCE (400): Malformed reference
        MISSING_PARAMETER (400): Neither ``translations`` nor ``languages`` given
    """
    with domain_errors():
        return await service.compare(
            ref,
            translation_ids=split_csv(translations),
            languages=split_csv(languages),
        )


@router.get("/{ref}", response_model=VerseResponse | PassageResponse)
async def get_verse(
    ref: str,
    language: str | None = LANGUAGE_QUERY,
    translation: str | None = TRANSLATION_QUERY,
    service: VerseService = Depends(get_verse_service),
) -> VerseResponse | PassageResponse:
    """
    Retrieve a single verse or a verse range.

    ``gen.1.1-1`` is treated exactly like ``gen.1.1``.

    Response (single):
        ```json
        {"reference": "Genesis 1:1", "translation": "en-kjv", "language": "en",
         "book": {"id": "gen", "name": "Genesis"}, "chapter": 1, "verse": 1,
         "text": "In the beginning God created the heaven and the earth."}
        ```

    Response (range) replaces ``verse``/``text`` with
    ``"verses": [{"number": 1, "text": "..."}, ...]``.

    Raises:
        INVALID_REFERENCE (400): Malformed reference, unknown book, bad chapter or range
        TRANSLATION_NOT_FOUND (404): No translation resolves
        BOOK_NOT_FOUND / CHAPTER_NOT_FOUND / VERSE_NOT_FOUND (404): Nothing stored there
    """
    with domain_errors():
        return await service.get_passage(
            ref,
            language=language or settings.DEFAULT_LANGUAGE,
            translation=translation,
        )
