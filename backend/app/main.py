"""
Bible API FastAPI Application

Read-only REST API serving Bible text. Provides endpoints for:
- Languages and translations available in the store
- The 66-book canon with English/French names and aliases
- Chapters, single verses, verse ranges and batches of references
- Cross-translation / cross-language comparison of a verse
- Case-insensitive substring search with highlighted matches

Architecture:
    - Storage: PostgreSQL (``translations`` and ``verses`` tables) via asyncpg
    - Book catalog: static in-memory table (backend/app/catalog.py)
    - Cache: in-process LRU with optional Redis second level
    - Metrics: Prometheus at /metrics

Environment Configuration:
    All settings loaded from the environment / .env via pydantic-settings.
    See backend/app/config.py for available options.

Interactive Documentation:
    - Swagger UI: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .db.postgres_async import close_pool
from .dependencies.cache import get_cache_manager
from .errors import register_exception_handlers
from .middleware.request_logging import RequestLoggingMiddleware
from .routers import books, health, languages, monitoring, search, translations, verses
from .utils.logging import configure_logging
from .utils.redis import close_redis


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    The database pool and Redis client are opened lazily by the first
    request that needs them; shutdown closes whatever was opened.
    """
    try:
        yield
    finally:
        await get_cache_manager().clear()
        await close_redis()
        await close_pool()


configure_logging(settings.LOG_LEVEL, service_name=settings.SERVICE_NAME)

app = FastAPI(
    title="Bible API",
    description="Read-only access to Bible translations, verses and search",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    default_response_class=JSONResponse,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/", tags=["root"])
def root() -> dict[str, Any]:
    """Describe the API: endpoint map and defaults."""
    prefix = settings.API_PREFIX
    return {
        "name": "Bible API",
        "version": settings.APP_VERSION,
        "endpoints": {
            "languages": f"GET {prefix}/languages",
            "translations": f"GET {prefix}/translations",
            "books": f"GET {prefix}/books",
            "book": f"GET {prefix}/books/{{id}}",
            "chapters": f"GET {prefix}/books/{{id}}/chapters",
            "chapter": f"GET {prefix}/books/{{id}}/chapters/{{chapter}}",
            "verse": f"GET {prefix}/verses/{{ref}}",
            "multipleVerses": f"GET {prefix}/verses?refs=...",
            "compare": f"GET {prefix}/verses/{{ref}}/compare",
            "search": f"GET {prefix}/search?q=...",
        },
        "defaults": {
            "language": settings.DEFAULT_LANGUAGE,
            "translation": settings.DEFAULT_TRANSLATION,
        },
    }


app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(languages.router, prefix=settings.API_PREFIX)
app.include_router(translations.router, prefix=settings.API_PREFIX)
app.include_router(books.router, prefix=settings.API_PREFIX)
app.include_router(verses.router, prefix=settings.API_PREFIX)
app.include_router(search.router, prefix=settings.API_PREFIX)
app.include_router(monitoring.router)  # No prefix - scraped at /metrics

app.add_middleware(
    RequestLoggingMiddleware,
    exempt_paths={"/healthz", f"{settings.API_PREFIX}/healthz", "/metrics"},
    metrics_enabled=settings.METRICS_ENABLED,
)
