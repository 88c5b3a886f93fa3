"""
Process-global AsyncConnectionPool for callers that want one.

The executors never use this implicitly; pass ``get_pool()`` to them.

    await init_pool()
    try:
        await insert("book", ["title"], ["Witcher"], get_pool())
    finally:
        await close_pool()
"""
import asyncio
from typing import Dict, Optional

from psycopg import AsyncConnection
from psycopg.rows import dict_row, DictRow
from psycopg_pool import AsyncConnectionPool

from pgcrud.core.config import get_settings
from pgcrud.core.logger import setup_logger

logger = setup_logger(__name__, include_location=True)

_pool: Optional[AsyncConnectionPool] = None
_lock = asyncio.Lock()


async def init_pool(conninfo: Optional[str] = None, **pool_kwargs) -> AsyncConnectionPool:
    """
    Initialize the global AsyncConnectionPool with dict_row as default.
    Safe to call multiple times. Size and timeout default to settings.
    """
    global _pool
    async with _lock:
        if _pool is None:
            settings = get_settings()
            conninfo = conninfo or settings.conn_string
            pool_kwargs.setdefault("min_size", settings.pool_min_size)
            pool_kwargs.setdefault("max_size", settings.pool_max_size)
            pool_kwargs.setdefault("timeout", settings.pool_timeout)
            pool_kwargs.setdefault("name", "pgcrud")
            pool = AsyncConnectionPool(
                conninfo,
                kwargs={"row_factory": dict_row},
                open=False,
                **pool_kwargs,
            )
            try:
                await pool.open(wait=True, timeout=pool_kwargs["timeout"])
            except Exception as e:
                logger.error(f"Failed to open Postgres pool {pool_kwargs['name']}: {e}")
                raise
            _pool = pool
            logger.info(
                f"Postgres pool {pool.name} opened | "
                f"min={pool_kwargs['min_size']}, max={pool_kwargs['max_size']}, timeout={pool_kwargs['timeout']}s"
            )
        else:
            logger.debug(f"Reusing existing pool {_pool.name}")
        return _pool


def get_pool() -> AsyncConnectionPool[AsyncConnection[DictRow]]:
    """Return the global pool."""
    if _pool is None:
        raise RuntimeError("Database pool is not initialized. Call init_pool() first.")
    return _pool


async def close_pool() -> None:
    """Close and reset the global connection pool."""
    global _pool
    async with _lock:
        if _pool is not None:
            logger.info(f"Closing Postgres pool {_pool.name}")
            try:
                await _pool.close()
            finally:
                _pool = None


def get_pool_stats() -> Dict[str, object]:
    """Size, available and waiting counts of the global pool, or {} if none."""
    if _pool is None:
        return {}
    pool_stats = _pool.get_stats()
    return {
        "name": _pool.name,
        "size": pool_stats.get("pool_size", 0),
        "available": pool_stats.get("pool_available", 0),
        "waiting": pool_stats.get("requests_waiting", 0),
    }
