"""
Substring search with highlighting.

Matching is a plain case-insensitive substring test, with no tokenizing or
ranking. Each hit carries a ``highlight`` copy of the verse text in which
every occurrence of the query is wrapped in ``<em>...</em>``::

    highlight("We love him, because he first loved us.", "LOVE")
    # 'We <em>love</em> him, because he first <em>love</em>d us.'
"""

from __future__ import annotations

import re

import asyncpg

from ..catalog import BookCatalog
from ..models import BookRef, SearchHit, SearchResponse
from ..repositories.search import SearchRepository
from ..utils.metrics import SEARCH_QUERIES
from .translations import TranslationService


def highlight(text: str, query: str) -> str:
    """Wrap each case-insensitive literal occurrence of ``query`` in ``<em>`` tags."""
    if not query:
        return text
    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    return pattern.sub(r"<em>\1</em>", text)


class SearchService:
    """Service layer for ``/search``."""

    def __init__(
        self,
        conn: asyncpg.Connection,
        catalog: BookCatalog,
        translations: TranslationService,
        repository: SearchRepository | None = None,
    ) -> None:
        self._catalog = catalog
        self._translations = translations
        self._repo = repository or SearchRepository(conn)

    async def search(
        self,
        query: str,
        *,
        language: str,
        translation: str | None,
        limit: int,
        offset: int,
    ) -> SearchResponse:
        """Run one page of a search. ``limit``/``offset`` arrive already validated."""
        resolved = await self._translations.resolve(translation, language)
        rows, total = await self._repo.search_verses(
            resolved.id, query, limit=limit, offset=offset
        )
        SEARCH_QUERIES.labels(outcome="hit" if total else "miss").inc()

        needle = query.strip()
        results = []
        for row in rows:
            book = self._catalog.by_number(row.book)
            if book is None:
                ref = BookRef(id=str(row.book), name=f"Book {row.book}")
            else:
                ref = BookRef(id=book.id, name=book.localized_name(language))
            results.append(
                SearchHit(
                    reference=f"{ref.name} {row.chapter}:{row.verse}",
                    book=ref,
                    chapter=row.chapter,
                    verse=row.verse,
                    text=row.text,
                    highlight=highlight(row.text, needle),
                )
            )

        return SearchResponse(
            query=query,
            translation=resolved.id,
            language=language,
            total=total,
            limit=limit,
            offset=offset,
            results=results,
        )
