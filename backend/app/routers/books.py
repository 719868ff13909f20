"""
Book and chapter router.

Books come from the static catalog, so ``/books/{id}`` never touches the
database. Chapter listings and chapter text are read from the verse store
for the resolved translation.

Example Usage:
    ```bash
    # All books with French names
    curl "http://localhost:8000/books?language=fr"

    # Resolve an alias
    curl http://localhost:8000/books/1cor

    # Verse counts per chapter of Psalms in the default translation
    curl http://localhost:8000/books/psa/chapters

    # Full text of John 3 in the NIV
    curl "http://localhost:8000/books/jhn/chapters/3?translation=en-niv"
    ```
"""

from fastapi import APIRouter, Depends, Query

from ..catalog import BookCatalog, get_catalog
from ..config import settings
from ..dependencies.services import get_book_service
from ..errors import ChapterNotFoundError
from ..models import BookResponse, BooksResponse, ChapterResponse, ChaptersResponse
from ..services.books import BookService, book_detail
from .common import ERROR_RESPONSES, domain_errors

router = APIRouter(prefix="/books", tags=["books"], responses=ERROR_RESPONSES)

LANGUAGE_QUERY = Query(None, description="Language for book names (e.g., en, fr)")
TRANSLATION_QUERY = Query(None, description="Translation id (e.g., en-kjv)")


@router.get("", response_model=BooksResponse)
async def list_books(
    language: str | None = LANGUAGE_QUERY,
    translation: str | None = TRANSLATION_QUERY,
    service: BookService = Depends(get_book_service),
) -> BooksResponse:
    """
    List the 66 canonical books with localized names.

    The translation is resolved (explicit id or the language default) and
    echoed so clients know which edition the listing applies to.

    Raises:
        TRANSLATION_NOT_FOUND (404): No translation resolves
    """
    with domain_errors():
        return await service.list_books(
            language=language or settings.DEFAULT_LANGUAGE,
            translation=translation,
        )


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(
    book_id: str,
    language: str | None = LANGUAGE_QUERY,
    catalog: BookCatalog = Depends(get_catalog),
) -> BookResponse:
    """
    Resolve one book by id or alias (``gen``, ``genesis``, ``gn``...).

    Response:
        ```json
        {"id": "1co", "number": 46, "name": "1 Corinthians", "language": "en",
         "testament": "new", "chapters": 16, "aliases": ["1corinthians", "..."]}
        ```

    Raises:
        BOOK_NOT_FOUND (404): Unknown id or alias
    """
    with domain_errors():
        return book_detail(catalog, book_id, language=language or settings.DEFAULT_LANGUAGE)


@router.get("/{book_id}/chapters", response_model=ChaptersResponse)
async def list_chapters(
    book_id: str,
    language: str | None = LANGUAGE_QUERY,
    translation: str | None = TRANSLATION_QUERY,
    service: BookService = Depends(get_book_service),
) -> ChaptersResponse:
    """List chapter numbers of a book with their verse counts."""
    with domain_errors():
        return await service.list_chapters(
            book_id,
            language=language or settings.DEFAULT_LANGUAGE,
            translation=translation,
        )


@router.get("/{book_id}/chapters/{chapter}", response_model=ChapterResponse)
async def get_chapter(
    book_id: str,
    chapter: str,
    language: str | None = LANGUAGE_QUERY,
    translation: str | None = TRANSLATION_QUERY,
    service: BookService = Depends(get_book_service),
) -> ChapterResponse:
    """
    Return every verse of one chapter.

    Raises:
        BOOK_NOT_FOUND (404): Unknown book
        CHAPTER_NOT_FOUND (404): Non-numeric, out of range, or not stored
        TRANSLATION_NOT_FOUND (404): No translation resolves
    """
    with domain_errors():
        # Digits only; more than 9 significant digits cannot name a chapter
        if not (chapter.isascii() and chapter.isdigit()) or len(chapter.lstrip("0")) > 9:
            raise ChapterNotFoundError(f"Chapter {chapter} not found")
        return await service.get_chapter(
            book_id,
            int(chapter),
            language=language or settings.DEFAULT_LANGUAGE,
            translation=translation,
        )
