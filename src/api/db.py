"""
Reelview Database Connection
============================

Pooled PostgreSQL access for the API layer (psycopg2).
The API keeps working without a database: analyses are then computed
on every request and not stored.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict

from ..data.config import get_settings

logger = logging.getLogger(__name__)

_pool = None


def get_pool():
    """Get or create connection pool (lazy singleton). None if unreachable."""
    global _pool
    if _pool is not None:
        return _pool

    try:
        from psycopg2 import pool as pg_pool
        config = get_settings().database
        _pool = pg_pool.ThreadedConnectionPool(
            config.pool_min_size, config.pool_max_size, **config.connection_dict
        )
        logger.info(f"DB pool created: {config.host}:{config.port}/{config.name}")
        return _pool
    except Exception as e:
        logger.warning(f"Failed to create DB pool: {e}")
        return None


def close_pool():
    """Close the connection pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("DB pool closed")


@contextmanager
def get_connection():
    """Get a connection from the pool (context manager)."""
    pool = get_pool()
    if pool is None:
        raise ConnectionError("Database pool not available")
    conn = pool.getconn()
    try:
        yield conn
    finally:
        pool.putconn(conn)


def check_health() -> Dict[str, Any]:
    """
    Check database health. Returns status dict.
    Non-blocking: returns 'disconnected' if DB is not reachable.
    """
    try:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute("SELECT version()")
            row = cur.fetchone()
            cur.close()
            version = row[0].split(",")[0] if row and row[0] else "unknown"
            return {"status": "connected", "version": version}
    except Exception as e:
        logger.warning(f"DB health check failed: {e}")
        return {"status": "disconnected", "error": str(e)}
