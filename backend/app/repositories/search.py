"""Substring search over verse text."""

from __future__ import annotations

import asyncpg

from ..models import SearchRow
from ..utils.metrics import timed_query

# Offsets beyond any possible verse count; also keeps OFFSET within BIGINT
MAX_OFFSET = 2**31 - 1


def like_pattern(query: str) -> str:
    """Build an ``ILIKE`` pattern matching ``query`` as a literal substring.

    ``\\``, ``%`` and ``_`` are escaped so user input never acts as a wildcard.
    """
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SearchRepository:
    """Repository providing SQL access for the search endpoint."""

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def search_verses(
        self,
        translation_id: str,
        query: str,
        *,
        limit: int,
        offset: int,
    ) -> tuple[list[SearchRow], int]:
        """
        Case-insensitive substring match within one translation.

        Returns the requested page in canonical order and the total number
        of matches, which does not depend on ``limit``/``offset``. A blank
        query matches nothing.
        """
        trimmed = query.strip()
        if not trimmed:
            return [], 0

        pattern = like_pattern(trimmed)

        with timed_query("search_verses"):
            rows = await self._conn.fetch(
                r"""
                SELECT book, chapter, verse, text
                FROM verses
                WHERE translation_id = $1
                  AND text ILIKE $2 ESCAPE '\'
                ORDER BY book, chapter, verse
                LIMIT $3 OFFSET $4
                """,
                translation_id,
                pattern,
                limit,
                offset,
            )

        with timed_query("search_verses_count"):
            total = await self._conn.fetchval(
                r"""
                SELECT COUNT(*)
                FROM verses
                WHERE translation_id = $1
                  AND text ILIKE $2 ESCAPE '\'
                """,
                translation_id,
                pattern,
            )

        return [SearchRow(**dict(r)) for r in rows], int(total or 0)
