"""Book and chapter responses assembled from the catalog and the verse store."""

from __future__ import annotations

import asyncpg

from ..catalog import BookCatalog, BookInfo
from ..errors import BookNotFoundError, ChapterNotFoundError
from ..models import (
    BookRef,
    BookResponse,
    BooksResponse,
    BookSummary,
    ChapterResponse,
    ChaptersResponse,
)
from ..repositories.verses import VerseRepository
from .translations import TranslationService


def book_ref(book: BookInfo, language: str) -> BookRef:
    return BookRef(id=book.id, name=book.localized_name(language))


def book_detail(catalog: BookCatalog, id_or_alias: str, *, language: str) -> BookResponse:
    """Describe one book from the catalog alone; no store access needed."""
    book = catalog.lookup(id_or_alias)
    if book is None:
        raise BookNotFoundError(f"Book '{id_or_alias}' not found")
    return BookResponse(
        id=book.id,
        number=book.number,
        name=book.localized_name(language),
        language=language,
        testament=book.testament,
        chapters=book.chapters,
        aliases=list(book.aliases),
    )


class BookService:
    """Service layer for the ``/books`` endpoints."""

    def __init__(
        self,
        conn: asyncpg.Connection,
        catalog: BookCatalog,
        translations: TranslationService,
        repository: VerseRepository | None = None,
    ) -> None:
        self._catalog = catalog
        self._translations = translations
        self._repo = repository or VerseRepository(conn)

    def _book(self, id_or_alias: str) -> BookInfo:
        book = self._catalog.lookup(id_or_alias)
        if book is None:
            raise BookNotFoundError(f"Book '{id_or_alias}' not found")
        return book

    async def list_books(self, *, language: str, translation: str | None) -> BooksResponse:
        resolved = await self._translations.resolve(translation, language)
        return BooksResponse(
            translation=resolved.id,
            language=language,
            books=[
                BookSummary(
                    id=book.id,
                    number=book.number,
                    name=book.localized_name(language),
                    testament=book.testament,
                    chapters=book.chapters,
                )
                for book in self._catalog
            ],
        )

    async def list_chapters(
        self,
        id_or_alias: str,
        *,
        language: str,
        translation: str | None,
    ) -> ChaptersResponse:
        book = self._book(id_or_alias)
        resolved = await self._translations.resolve(translation, language)
        chapters = await self._repo.get_chapter_summaries(resolved.id, book.number)
        return ChaptersResponse(
            translation=resolved.id,
            language=language,
            book=book_ref(book, language),
            chapters=chapters,
        )

    async def get_chapter(
        self,
        id_or_alias: str,
        chapter: int,
        *,
        language: str,
        translation: str | None,
    ) -> ChapterResponse:
        book = self._book(id_or_alias)
        if chapter < 1 or chapter > book.chapters:
            raise ChapterNotFoundError(f"Chapter {chapter} not found in {book.name}")
        resolved = await self._translations.resolve(translation, language)
        verses = await self._repo.get_chapter_verses(resolved.id, book.number, chapter)
        if not verses:
            raise ChapterNotFoundError(f"Chapter {chapter} not found")
        return ChapterResponse(
            translation=resolved.id,
            language=language,
            book=book_ref(book, language),
            chapter=chapter,
            verses=verses,
        )
