"""Business logic for verse retrieval and cross-translation comparison."""

from __future__ import annotations

from collections.abc import Sequence

import asyncpg

from ..catalog import BookInfo, language_info
from ..errors import (
    BookNotFoundError,
    ChapterNotFoundError,
    InvalidReferenceError,
    MissingParameterError,
    VerseNotFoundError,
)
from ..models import (
    BatchVerse,
    BatchVersesResponse,
    CompareResponse,
    Comparison,
    PassageResponse,
    Translation,
    VerseResponse,
    VerseRow,
)
from ..repositories.verses import VerseRepository
from ..utils.logging import get_logger
from .books import book_ref
from .references import ParsedReference, ReferenceParser, format_reference
from .translations import TranslationService

logger = get_logger(__name__)


class VerseService:
    """Service layer for the ``/verses`` endpoints."""

    def __init__(
        self,
        conn: asyncpg.Connection,
        parser: ReferenceParser,
        translations: TranslationService,
        repository: VerseRepository | None = None,
    ) -> None:
        self._parser = parser
        self._translations = translations
        self._repo = repository or VerseRepository(conn)

    async def _rows(
        self,
        translation_id: str,
        book: BookInfo,
        ref: ParsedReference,
    ) -> list[VerseRow]:
        """Verses addressed by ``ref``; empty when none are stored."""
        if ref.is_range:
            return await self._repo.get_verse_range(
                translation_id, book.number, ref.chapter, ref.verse_start, ref.last_verse
            )
        row = await self._repo.get_verse(translation_id, book.number, ref.chapter, ref.verse_start)
        return [row] if row else []

    async def _raise_missing(
        self,
        translation_id: str,
        book: BookInfo,
        ref: ParsedReference,
    ) -> None:
        """Raise the most specific not-found error for an empty lookup."""
        if not await self._repo.has_book(translation_id, book.number):
            raise BookNotFoundError("Book not found in translation")
        if not await self._repo.has_chapter(translation_id, book.number, ref.chapter):
            raise ChapterNotFoundError(f"Chapter {ref.chapter} not found")
        if ref.is_range:
            raise VerseNotFoundError(f"Verses {ref.verse_start}-{ref.verse_end} not found")
        raise VerseNotFoundError(f"Verse {ref.verse_start} not found")

    async def get_passage(
        self,
        ref: str,
        *,
        language: str,
        translation: str | None,
    ) -> VerseResponse | PassageResponse:
        """Return one verse, or a range when the reference spans several verses."""
        parsed, book = self._parser.parse(ref).unwrap()
        resolved = await self._translations.resolve(translation, language)

        rows = await self._rows(resolved.id, book, parsed)
        if not rows:
            await self._raise_missing(resolved.id, book, parsed)

        reference = format_reference(parsed, book, language)
        if parsed.is_range:
            return PassageResponse(
                reference=reference,
                translation=resolved.id,
                language=language,
                book=book_ref(book, language),
                chapter=parsed.chapter,
                verses=rows,
            )
        return VerseResponse(
            reference=reference,
            translation=resolved.id,
            language=language,
            book=book_ref(book, language),
            chapter=parsed.chapter,
            verse=rows[0].number,
            text=rows[0].text,
        )

    async def get_many(
        self,
        refs: str,
        *,
        language: str,
        translation: str | None,
    ) -> BatchVersesResponse:
        """
        Look up a comma-separated list of references in input order.

        Any malformed reference fails the whole batch. References that parse
        but address nothing in the store are left out. A range contributes
        one entry per stored verse.
        """
        resolved = await self._translations.resolve(translation, language)

        results = self._parser.parse_multiple(refs)
        for result in results:
            if not result.ok:
                raise InvalidReferenceError(result.error or "Invalid reference")

        entries: list[BatchVerse] = []
        for result in results:
            parsed, book = result.unwrap()
            for row in await self._rows(resolved.id, book, parsed):
                single = ParsedReference(book=book.id, chapter=parsed.chapter, verse_start=row.number)
                entries.append(
                    BatchVerse(
                        reference=format_reference(single, book, language),
                        book=book_ref(book, language),
                        chapter=parsed.chapter,
                        verse=row.number,
                        text=row.text,
                    )
                )

        return BatchVersesResponse(translation=resolved.id, language=language, verses=entries)

    async def compare(
        self,
        ref: str,
        *,
        translation_ids: Sequence[str] = (),
        languages: Sequence[str] = (),
    ) -> CompareResponse:
        """
        Render one reference across several translations or languages.

        Translation ids take precedence over languages. Entries whose
        translation does not resolve, or which lack the verse, are skipped.
        """
        parsed, book = self._parser.parse(ref).unwrap()

        targets: list[Translation] = []
        if translation_ids:
            for translation_id in translation_ids:
                meta = await self._translations.get_translation_meta(translation_id)
                if meta is None:
                    logger.debug("compare_skip_translation", extra={"translation": translation_id})
                    continue
                targets.append(meta)
        elif languages:
            for code in languages:
                meta = await self._translations.get_default_translation(code)
                if meta is None:
                    logger.debug("compare_skip_language", extra={"language": code})
                    continue
                targets.append(meta)
        else:
            raise MissingParameterError(
                "Either translations or languages query parameter is required"
            )

        comparisons: list[Comparison] = []
        for target in targets:
            rows = await self._rows(target.id, book, parsed)
            if not rows:
                continue
            comparisons.append(
                Comparison(
                    language=target.language,
                    language_name=language_info(target.language).name,
                    translation=target.id,
                    translation_name=target.name,
                    book_name=book.localized_name(target.language),
                    text=" ".join(row.text for row in rows),
                )
            )

        return CompareResponse(
            reference=format_reference(parsed, book, "en"),
            book=book_ref(book, "en"),
            chapter=parsed.chapter,
            verse=parsed.verse_start,
            comparisons=comparisons,
        )
