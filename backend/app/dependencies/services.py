"""FastAPI dependency providers for the service layer."""

from __future__ import annotations

import asyncpg
from fastapi import Depends

from ..catalog import BookCatalog, get_catalog
from ..db.postgres_async import get_pg
from ..services.books import BookService
from ..services.references import ReferenceParser
from ..services.search import SearchService
from ..services.translations import TranslationService
from ..services.verses import VerseService
from ..utils.cache import CacheManager
from .cache import get_cache_manager


def get_reference_parser(catalog: BookCatalog = Depends(get_catalog)) -> ReferenceParser:
    return ReferenceParser(catalog)


def get_translation_service(
    conn: asyncpg.Connection = Depends(get_pg),
    cache: CacheManager = Depends(get_cache_manager),
) -> TranslationService:
    return TranslationService(conn, cache)


def get_book_service(
    conn: asyncpg.Connection = Depends(get_pg),
    catalog: BookCatalog = Depends(get_catalog),
    translations: TranslationService = Depends(get_translation_service),
) -> BookService:
    return BookService(conn, catalog, translations)


def get_verse_service(
    conn: asyncpg.Connection = Depends(get_pg),
    parser: ReferenceParser = Depends(get_reference_parser),
    translations: TranslationService = Depends(get_translation_service),
) -> VerseService:
    return VerseService(conn, parser, translations)


def get_search_service(
    conn: asyncpg.Connection = Depends(get_pg),
    catalog: BookCatalog = Depends(get_catalog),
    translations: TranslationService = Depends(get_translation_service),
) -> SearchService:
    return SearchService(conn, catalog, translations)
