"""
===============================================================================
CRC CARD — infrastructure/db/instrumentation.py
===============================================================================

Classes:
  - TimedConnection (Proxy)
  - InstrumentedConnectionPool (Facade/Proxy)

Responsibilities:
  - Time conn.execute(...) without touching the repositories.
  - Log slow queries (low cardinality: statement kind only).

Collaborators:
  - crosscutting.logger
  - crosscutting.metrics.observe_db_query_duration
  - psycopg_pool.ConnectionPool (real pool)
===============================================================================
"""

from __future__ import annotations

import time
from typing import Any, ContextManager

from ...crosscutting.logger import logger
from ...crosscutting.metrics import observe_db_query_duration
from .errors import DatabaseConnectionError

DEFAULT_SLOW_QUERY_SECONDS = 0.25


def statement_kind(sql: Any) -> str:
    """First SQL keyword, upper-cased (SELECT/INSERT/...)."""
    parts = str(sql).split(None, 1)
    return parts[0].upper() if parts else "UNKNOWN"


class TimedConnection:
    """
    Connection proxy: only execute() is wrapped, everything else is
    delegated to the real connection.
    """

    def __init__(self, inner_conn, *, slow_query_seconds: float) -> None:
        self._conn = inner_conn
        self._slow = slow_query_seconds

    def execute(self, sql, *args, **kwargs):
        start = time.perf_counter()
        try:
            return self._conn.execute(sql, *args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            kind = statement_kind(sql)
            observe_db_query_duration(kind, elapsed)
            if elapsed >= self._slow:
                logger.warning(
                    "slow DB query",
                    extra={"kind": kind, "seconds": round(elapsed, 4)},
                )

    def __getattr__(self, item: str):
        return getattr(self._conn, item)


class _ConnectionContext(ContextManager[TimedConnection]):
    """Wraps the pool's connection context manager."""

    def __init__(self, inner_ctx, *, slow_query_seconds: float) -> None:
        self._inner_ctx = inner_ctx
        self._slow = slow_query_seconds

    def __enter__(self) -> TimedConnection:
        try:
            conn = self._inner_ctx.__enter__()
        except Exception as exc:
            raise DatabaseConnectionError(
                "Could not acquire a DB connection", original_error=exc
            ) from exc
        return TimedConnection(conn, slow_query_seconds=self._slow)

    def __exit__(self, exc_type, exc, tb):
        return self._inner_ctx.__exit__(exc_type, exc, tb)


class InstrumentedConnectionPool:
    """
    Facade over the real pool.

    Repositories keep writing `with pool.connection() as conn:` and get a
    TimedConnection.
    """

    def __init__(
        self, inner_pool, *, slow_query_seconds: float = DEFAULT_SLOW_QUERY_SECONDS
    ) -> None:
        self._pool = inner_pool
        self._slow_seconds = slow_query_seconds

    def connection(self, *args, **kwargs) -> ContextManager[TimedConnection]:
        return _ConnectionContext(
            self._pool.connection(*args, **kwargs),
            slow_query_seconds=self._slow_seconds,
        )

    def __getattr__(self, item: str):
        return getattr(self._pool, item)
