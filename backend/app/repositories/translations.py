"""Translation metadata queries."""

from __future__ import annotations

import asyncpg

from ..models import Translation
from ..utils.metrics import timed_query


class TranslationRepository:
    """Read-only access to the ``translations`` table."""

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def list_translations(self) -> list[Translation]:
        """
        Return every translation ordered by language, then name.

        The table is small and immutable after import, so callers filter
        this list (through the cache) rather than issuing narrower queries.
        """
        with timed_query("list_translations"):
            rows = await self._conn.fetch(
                """
                SELECT id, name, language, status, filename
                FROM translations
                ORDER BY language, name
                """
            )
        return [Translation(**dict(r)) for r in rows]
