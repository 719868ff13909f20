"""
Pytest configuration and shared fixtures for Bible API tests.

Provides:
- Test client setup with FastAPI TestClient
- A mock PostgreSQL connection answering the repositories' SQL from an
  in-memory excerpt of three translations (en-kjv, en-niv, fr-lsg)
- Test logging
"""

import logging
import re
from collections.abc import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from backend.app.db.postgres_async import get_pg
from backend.app.dependencies.cache import get_cache_manager
from backend.app.main import app

# ============================================================================
# Logging Configuration for Tests
# ============================================================================


def setup_test_logging():
    """Configure logging for test runs."""
    logger = logging.getLogger("tests")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-25s | %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Keep application logs quiet unless something goes wrong
    logging.getLogger("bible_api").setLevel(logging.WARNING)
    logging.getLogger("backend").setLevel(logging.WARNING)

    return logger


test_logger = setup_test_logging()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests with mocked dependencies")


# ============================================================================
# In-memory store
# ============================================================================

TRANSLATIONS = [
    {
        "id": "en-kjv",
        "name": "King James Version",
        "language": "en",
        "status": "Public Domain",
        "filename": "eng-kjv.osis.xml",
    },
    {
        "id": "en-niv",
        "name": "New International Version",
        "language": "en",
        "status": "Copyrighted",
        "filename": "eng-niv.osis.xml",
    },
    {
        "id": "fr-lsg",
        "name": "Louis Segond 1910",
        "language": "fr",
        "status": "Public Domain",
        "filename": "fra-lsg.osis.xml",
    },
]

PSALM_23_KJV = [
    "The LORD is my shepherd; I shall not want.",
    "He maketh me to lie down in green pastures: he leadeth me beside the still waters.",
    "He restoreth my soul: he leadeth me in the paths of righteousness for his name's sake.",
    "Yea, though I walk through the valley of the shadow of death, I will fear no evil: "
    "for thou art with me; thy rod and thy staff they comfort me.",
    "Thou preparest a table before me in the presence of mine enemies: "
    "thou anointest my head with oil; my cup runneth over.",
    "Surely goodness and mercy shall follow me all the days of my life: "
    "and I will dwell in the house of the LORD for ever.",
]

# (translation_id, book, chapter, verse) -> text
VERSES: dict[tuple[str, int, int, int], str] = {
    ("en-kjv", 1, 1, 1): "In the beginning God created the heaven and the earth.",
    ("en-kjv", 1, 1, 2): (
        "And the earth was without form, and void; and darkness was upon the face of the deep. "
        "And the Spirit of God moved upon the face of the waters."
    ),
    ("en-kjv", 1, 1, 3): "And God said, Let there be light: and there was light.",
    **{("en-kjv", 19, 23, idx + 1): text for idx, text in enumerate(PSALM_23_KJV)},
    ("en-kjv", 20, 17, 17): "A friend loveth at all times, and a brother is born for adversity.",
    ("en-kjv", 40, 22, 37): (
        "Jesus said unto him, Thou shalt love the Lord thy God with all thy heart, "
        "and with all thy soul, and with all thy mind."
    ),
    ("en-kjv", 43, 3, 16): (
        "For God so loved the world, that he gave his only begotten Son, that whosoever "
        "believeth in him should not perish, but have everlasting life."
    ),
    ("en-kjv", 43, 3, 17): (
        "For God sent not his Son into the world to condemn the world; "
        "but that the world through him might be saved."
    ),
    ("en-kjv", 43, 13, 34): (
        "A new commandment I give unto you, That ye love one another; "
        "as I have loved you, that ye also love one another."
    ),
    ("en-kjv", 43, 15, 13): (
        "Greater love hath no man than this, that a man lay down his life for his friends."
    ),
    ("en-kjv", 45, 8, 28): (
        "And we know that all things work together for good to them that love God, "
        "to them who are the called according to his purpose."
    ),
    ("en-kjv", 45, 13, 10): (
        "Love worketh no ill to his neighbour: therefore love is the fulfilling of the law."
    ),
    ("en-kjv", 62, 4, 8): "He that loveth not knoweth not God; for God is love.",
    ("en-kjv", 62, 4, 19): "We love him, because he first loved us.",
    ("en-niv", 1, 1, 1): "In the beginning God created the heavens and the earth.",
    ("en-niv", 43, 3, 16): (
        "For God so loved the world that he gave his one and only Son, that whoever "
        "believes in him shall not perish but have eternal life."
    ),
    ("fr-lsg", 1, 1, 1): "Au commencement, Dieu créa les cieux et la terre.",
    ("fr-lsg", 19, 23, 1): "Cantique de David. L'Éternel est mon berger: je ne manquerai de rien.",
    ("fr-lsg", 43, 3, 16): (
        "Car Dieu a tant aimé le monde qu'il a donné son Fils unique, afin que quiconque "
        "croit en lui ne périsse point, mais qu'il ait la vie éternelle."
    ),
}


INT16_RANGE = range(-(2**15), 2**15)
INT64_RANGE = range(-(2**63), 2**63)


def _bind(bounds: range, kind: str, *values: int) -> None:
    """Fail like asyncpg does when a parameter does not fit its column type."""
    for value in values:
        if value not in bounds:
            raise OverflowError(f"value out of {kind} range")


def _unescape_like(pattern: str) -> str:
    """Turn ``%lit\\%eral%`` back into the literal substring it matches."""
    return re.sub(r"\\(.)", r"\1", pattern[1:-1])


def _matches(translation_id: str, pattern: str) -> list[tuple[int, int, int, str]]:
    needle = _unescape_like(pattern).lower()
    return sorted(
        (book, chapter, verse, text)
        for (tid, book, chapter, verse), text in VERSES.items()
        if tid == translation_id and needle in text.lower()
    )


def _chapter(translation_id: str, book: int, chapter: int) -> list[dict]:
    return [
        {"number": verse, "text": text}
        for (tid, b, c, verse), text in sorted(VERSES.items())
        if (tid, b, c) == (translation_id, book, chapter)
    ]


# ============================================================================
# Mock Database Fixtures
# ============================================================================


@pytest.fixture
def mock_pg_conn():
    """
    Mock PostgreSQL connection for unit tests.

    ``fetch``/``fetchrow``/``fetchval`` dispatch on the SQL text issued by the
    repositories and answer from ``VERSES``/``TRANSLATIONS``.
    """
    test_logger.debug("Creating mock PostgreSQL connection")
    mock_conn = AsyncMock()

    async def fetch_side_effect(query, *args, **kwargs):
        if "FROM translations" in query:
            return sorted(TRANSLATIONS, key=lambda t: (t["language"], t["name"]))
        if "ILIKE" in query:
            translation_id, pattern, limit, offset = args
            _bind(INT64_RANGE, "int64", limit, offset)
            hits = _matches(translation_id, pattern)[offset : offset + limit]
            return [
                {"book": book, "chapter": chapter, "verse": verse, "text": text}
                for book, chapter, verse, text in hits
            ]
        if "GROUP BY chapter" in query:
            translation_id, book = args
            _bind(INT16_RANGE, "int16", book)
            counts: dict[int, int] = {}
            for tid, b, chapter, _verse in VERSES:
                if (tid, b) == (translation_id, book):
                    counts[chapter] = counts.get(chapter, 0) + 1
            return [{"number": c, "verses": n} for c, n in sorted(counts.items())]
        if "BETWEEN" in query:
            translation_id, book, chapter, start, end = args
            _bind(INT16_RANGE, "int16", book, chapter, start, end)
            return [
                row
                for row in _chapter(translation_id, book, chapter)
                if start <= row["number"] <= end
            ]
        if "FROM verses" in query:
            translation_id, book, chapter = args
            _bind(INT16_RANGE, "int16", book, chapter)
            return _chapter(translation_id, book, chapter)
        return []

    async def fetchrow_side_effect(query, *args, **kwargs):
        translation_id, book, chapter, verse = args
        _bind(INT16_RANGE, "int16", book, chapter, verse)
        text = VERSES.get((translation_id, book, chapter, verse))
        if text is None:
            return None
        return {"number": verse, "text": text}

    async def fetchval_side_effect(query, *args, **kwargs):
        if "COUNT(*)" in query:
            translation_id, pattern = args
            return len(_matches(translation_id, pattern))
        if "EXISTS" in query:
            _bind(INT16_RANGE, "int16", *args[1:])
            key = tuple(args)
            return any(stored[: len(key)] == key for stored in VERSES)
        return None

    mock_conn.fetch = AsyncMock(side_effect=fetch_side_effect)
    mock_conn.fetchrow = AsyncMock(side_effect=fetchrow_side_effect)
    mock_conn.fetchval = AsyncMock(side_effect=fetchval_side_effect)
    return mock_conn


@pytest.fixture
def override_db_dependencies(mock_pg_conn):
    """
    Override the database dependency with the mock connection.

    The cache manager is rebuilt per test so cached translation lists never
    leak between tests.
    """
    get_cache_manager.cache_clear()

    async def mock_get_pg():
        yield mock_pg_conn

    app.dependency_overrides[get_pg] = mock_get_pg

    yield

    app.dependency_overrides.clear()
    get_cache_manager.cache_clear()


@pytest.fixture
def client(override_db_dependencies) -> Generator[TestClient, None, None]:
    """Provide a TestClient with mocked dependencies."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
