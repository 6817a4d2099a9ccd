"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Component:
  PostgreSQL connection pool (process singleton)

Responsibilities:
  - Initialize, expose and close the connection pool.
  - Configure each connection (statement_timeout).
  - Hand out an instrumented pool (query timings without touching repos).

Collaborators:
  - psycopg_pool.ConnectionPool
  - infrastructure/db/instrumentation.InstrumentedConnectionPool

Principles:
  - Fail-fast (double init, use before init)
  - One global pool per process
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from psycopg_pool import ConnectionPool

from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError
from .instrumentation import InstrumentedConnectionPool

_pool: Optional[InstrumentedConnectionPool] = None
_pool_lock = threading.Lock()


def _make_configure(statement_timeout_ms: int):
    def _configure_connection(conn) -> None:
        # Guardrail against hung queries; must leave the connection idle.
        if statement_timeout_ms > 0:
            conn.execute(f"SET statement_timeout = {int(statement_timeout_ms)}")
            conn.commit()

    return _configure_connection


def init_pool(
    database_url: str,
    min_size: int,
    max_size: int,
    *,
    statement_timeout_ms: int = 0,
) -> InstrumentedConnectionPool:
    """Initialize the pool (once per process)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("The pool is already initialized")

        logger.info(
            "Initializing DB pool",
            extra={"min_size": min_size, "max_size": max_size},
        )

        real_pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_make_configure(statement_timeout_ms),
            open=True,
        )
        _pool = InstrumentedConnectionPool(real_pool)

        logger.info("DB pool initialized")
        return _pool


def get_pool() -> InstrumentedConnectionPool:
    if _pool is None:
        raise PoolNotInitializedError("Pool not initialized; call init_pool() first")
    return _pool


def close_pool() -> None:
    """Close the pool (idempotent)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            logger.info("Closing DB pool")
            try:
                _pool.close()
            finally:
                _pool = None
            logger.info("DB pool closed")


def reset_pool() -> None:
    """Drop the singleton without closing (tests only)."""
    global _pool

    with _pool_lock:
        _pool = None
