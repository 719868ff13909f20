"""Translation metadata lookup and default-translation policy."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

import asyncpg

from ..errors import TranslationNotFoundError
from ..models import Translation
from ..repositories.translations import TranslationRepository
from ..utils.cache import CacheManager

# Preferred edition per language when the caller names none
DEFAULT_TRANSLATIONS: Final[dict[str, str]] = {
    "en": "en-kjv",
    "fr": "fr-lsg",
}

_ALL_TRANSLATIONS_KEY = "translations:all"


def choose_default_translation(
    language: str,
    translations: Sequence[Translation],
) -> Translation | None:
    """
    Pick the default translation for ``language``.

    Prefers the curated id from ``DEFAULT_TRANSLATIONS`` when that language
    has it, otherwise the first of the language's translations in the
    order given (the store returns them sorted by name).
    """
    candidates = [t for t in translations if t.language == language]
    if not candidates:
        return None
    preferred = DEFAULT_TRANSLATIONS.get(language)
    if preferred:
        for translation in candidates:
            if translation.id == preferred:
                return translation
    return candidates[0]


class TranslationService:
    """Resolves translation ids and languages to stored translations."""

    def __init__(
        self,
        conn: asyncpg.Connection,
        cache: CacheManager | None = None,
        repository: TranslationRepository | None = None,
    ) -> None:
        self._repo = repository or TranslationRepository(conn)
        self._cache = cache

    async def _all(self) -> list[Translation]:
        if self._cache is None:
            return await self._repo.list_translations()
        return await self._cache.get_or_set(_ALL_TRANSLATIONS_KEY, self._repo.list_translations)

    async def list_translations(self, language: str | None = None) -> list[Translation]:
        """All translations, or those of one language sorted by name."""
        translations = await self._all()
        if language is None:
            return translations
        return sorted(
            (t for t in translations if t.language == language),
            key=lambda t: t.name,
        )

    async def get_translation_meta(self, translation_id: str) -> Translation | None:
        for translation in await self._all():
            if translation.id == translation_id:
                return translation
        return None

    async def get_default_translation(self, language: str) -> Translation | None:
        return choose_default_translation(language, await self.list_translations(language))

    async def list_languages(self) -> list[str]:
        return sorted({t.language for t in await self._all()})

    async def resolve(self, translation_id: str | None, language: str) -> Translation:
        """
        Return the explicitly requested translation or the language default.

        Raises:
            TranslationNotFoundError: If neither resolves
        """
        if translation_id:
            translation = await self.get_translation_meta(translation_id)
        else:
            translation = await self.get_default_translation(language)
        if translation is None:
            raise TranslationNotFoundError(f"Translation '{translation_id or language}' not found")
        return translation
