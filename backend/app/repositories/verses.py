"""Verse data access layer."""

from __future__ import annotations

import asyncpg

from ..models import ChapterSummary, VerseRow
from ..utils.metrics import timed_query

# Largest value the SMALLINT verse column can hold
MAX_VERSE = 32767


class VerseRepository:
    """Read-only verse lookups keyed by translation, book number and chapter."""

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def get_verse(
        self,
        translation_id: str,
        book: int,
        chapter: int,
        verse: int,
    ) -> VerseRow | None:
        if verse > MAX_VERSE:
            return None
        with timed_query("get_verse"):
            row = await self._conn.fetchrow(
                """
                SELECT verse AS number, text
                FROM verses
                WHERE translation_id = $1
                  AND book = $2
                  AND chapter = $3
                  AND verse = $4
                """,
                translation_id,
                book,
                chapter,
                verse,
            )
        return VerseRow(**dict(row)) if row else None

    async def get_verse_range(
        self,
        translation_id: str,
        book: int,
        chapter: int,
        start: int,
        end: int,
    ) -> list[VerseRow]:
        """Verses ``start..end`` inclusive; gaps in the store simply shorten the list."""
        if start > MAX_VERSE:
            return []
        end = min(end, MAX_VERSE)
        with timed_query("get_verse_range"):
            rows = await self._conn.fetch(
                """
                SELECT verse AS number, text
                FROM verses
                WHERE translation_id = $1
                  AND book = $2
                  AND chapter = $3
                  AND verse BETWEEN $4 AND $5
                ORDER BY verse
                """,
                translation_id,
                book,
                chapter,
                start,
                end,
            )
        return [VerseRow(**dict(r)) for r in rows]

    async def get_chapter_verses(
        self,
        translation_id: str,
        book: int,
        chapter: int,
    ) -> list[VerseRow]:
        with timed_query("get_chapter_verses"):
            rows = await self._conn.fetch(
                """
                SELECT verse AS number, text
                FROM verses
                WHERE translation_id = $1
                  AND book = $2
                  AND chapter = $3
                ORDER BY verse
                """,
                translation_id,
                book,
                chapter,
            )
        return [VerseRow(**dict(r)) for r in rows]

    async def get_chapter_summaries(
        self,
        translation_id: str,
        book: int,
    ) -> list[ChapterSummary]:
        """Chapter numbers of a book with their verse counts, ascending."""
        with timed_query("get_chapter_summaries"):
            rows = await self._conn.fetch(
                """
                SELECT chapter AS number, COUNT(*) AS verses
                FROM verses
                WHERE translation_id = $1
                  AND book = $2
                GROUP BY chapter
                ORDER BY chapter
                """,
                translation_id,
                book,
            )
        return [ChapterSummary(**dict(r)) for r in rows]

    async def has_chapter(self, translation_id: str, book: int, chapter: int) -> bool:
        with timed_query("has_chapter"):
            found = await self._conn.fetchval(
                """
                SELECT EXISTS (
                  SELECT 1 FROM verses
                  WHERE translation_id = $1 AND book = $2 AND chapter = $3
                )
                """,
                translation_id,
                book,
                chapter,
            )
        return bool(found)

    async def has_book(self, translation_id: str, book: int) -> bool:
        with timed_query("has_book"):
            found = await self._conn.fetchval(
                """
                SELECT EXISTS (
                  SELECT 1 FROM verses
                  WHERE translation_id = $1 AND book = $2
                )
                """,
                translation_id,
                book,
            )
        return bool(found)
