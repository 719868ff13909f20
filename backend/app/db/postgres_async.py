"""
Async PostgreSQL connection pooling for FastAPI.

The pool is created lazily by the first request that needs the database
and is reused for the lifetime of the process. Every connection is put in
read-only mode: the API never writes at request time.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import asyncpg

from ..config import settings
from ..utils.logging import get_logger

logger = get_logger(__name__)


def _normalize_dsn(dsn: str) -> str:
    """
    Normalize PostgreSQL DSN to the ``postgresql://`` form asyncpg expects.

    Strips SQLAlchemy-style driver specifications (``postgresql+psycopg://``)
    and rewrites the ``postgres://`` shorthand.
    """
    if dsn.startswith(("postgresql+", "postgres+")):
        dsn = "postgresql://" + dsn.split("://", 1)[1]

    if dsn.startswith("postgres://"):
        dsn = "postgresql://" + dsn.split("://", 1)[1]

    return dsn


DSN = _normalize_dsn(settings.DATABASE_URL)

_pool: asyncpg.Pool | None = None
_pool_lock = asyncio.Lock()


async def _init_conn(conn: asyncpg.Connection) -> None:
    """Apply per-connection session settings."""
    await conn.execute(
        f"""
        SET application_name = '{settings.SERVICE_NAME}';
        SET statement_timeout = '{settings.PG_STATEMENT_TIMEOUT}';
        SET default_transaction_read_only = on;
        """
    )


async def init_pool(
    min_size: int | None = None,
    max_size: int | None = None,
) -> asyncpg.Pool:
    """
    Return the global asyncpg pool, creating it on first use.

    Raises:
        asyncpg.PostgresError, OSError: If the database cannot be reached
    """
    global _pool

    if _pool is not None:
        return _pool

    async with _pool_lock:
        if _pool is None:
            _pool = await asyncpg.create_pool(
                dsn=DSN,
                min_size=min_size or settings.PG_POOL_MIN_SIZE,
                max_size=max_size or settings.PG_POOL_MAX_SIZE,
                max_inactive_connection_lifetime=60,
                init=_init_conn,
                statement_cache_size=1024,
            )
            logger.info(
                "pg_pool_created",
                extra={"min_size": _pool.get_min_size(), "max_size": _pool.get_max_size()},
            )
    return _pool


async def close_pool() -> None:
    """Close the pool if one was created."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("pg_pool_closed")


async def get_pg() -> AsyncIterator[asyncpg.Connection]:
    """
    FastAPI dependency yielding a pooled connection for the current request.

    Example:
        ```python
        @router.get("/translations")
        async def list_translations(conn: asyncpg.Connection = Depends(get_pg)):
            return await conn.fetch("SELECT id, name FROM translations")
        ```
    """
    pool = await init_pool()
    async with pool.acquire() as conn:
        yield conn
