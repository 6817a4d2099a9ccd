"""
Name: Database Pool Tests

Responsibilities:
  - Test pool lifecycle (init, get, close, reset)
  - Test the instrumented pool wrapper (timings, acquisition failures)
  - Offline unit tests (no real DB)

Notes:
  - Uses mocking for ConnectionPool
  - Tests pool singleton behavior
"""

from unittest.mock import MagicMock, patch

import pytest


@pytest.mark.unit
class TestPoolLifecycle:
    """Test pool initialization and cleanup."""

    def test_init_pool_creates_pool(self):
        """init_pool should create a ConnectionPool and wrap it."""
        from user_directory.infrastructure.db.instrumentation import (
            InstrumentedConnectionPool,
        )
        from user_directory.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()

        with patch("user_directory.infrastructure.db.pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool

            result = init_pool("postgresql://test", min_size=2, max_size=10)

            MockPool.assert_called_once()
            assert MockPool.call_args.kwargs["min_size"] == 2
            assert MockPool.call_args.kwargs["max_size"] == 10
            assert isinstance(result, InstrumentedConnectionPool)

        reset_pool()

    def test_init_pool_twice_raises_error(self):
        from user_directory.infrastructure.db.errors import PoolAlreadyInitializedError
        from user_directory.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()

        with patch("user_directory.infrastructure.db.pool.ConnectionPool"):
            init_pool("postgresql://test", min_size=2, max_size=10)

            with pytest.raises(PoolAlreadyInitializedError, match="already initialized"):
                init_pool("postgresql://test", min_size=2, max_size=10)

        reset_pool()

    def test_get_pool_without_init_raises_error(self):
        from user_directory.infrastructure.db.errors import PoolNotInitializedError
        from user_directory.infrastructure.db.pool import get_pool, reset_pool

        reset_pool()

        with pytest.raises(PoolNotInitializedError, match="not initialized"):
            get_pool()

    def test_close_pool_clears_singleton(self):
        from user_directory.crosscutting.exceptions import DatabaseError
        from user_directory.infrastructure.db.pool import (
            close_pool,
            get_pool,
            init_pool,
            reset_pool,
        )

        reset_pool()

        with patch("user_directory.infrastructure.db.pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool

            init_pool("postgresql://test", min_size=2, max_size=10)
            close_pool()

            mock_pool.close.assert_called_once()

            with pytest.raises(DatabaseError, match="not initialized"):
                get_pool()

        reset_pool()

    def test_close_pool_is_idempotent(self):
        from user_directory.infrastructure.db.pool import close_pool, reset_pool

        reset_pool()
        close_pool()
        close_pool()

    def test_reset_pool_allows_reinit(self):
        from user_directory.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()

        with patch("user_directory.infrastructure.db.pool.ConnectionPool"):
            init_pool("postgresql://test", min_size=2, max_size=10)
            reset_pool()

            # Should not raise
            init_pool("postgresql://test", min_size=2, max_size=10)

        reset_pool()

    def test_statement_timeout_is_applied_per_connection(self):
        from user_directory.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()

        with patch("user_directory.infrastructure.db.pool.ConnectionPool") as MockPool:
            init_pool(
                "postgresql://test", min_size=1, max_size=2, statement_timeout_ms=5000
            )
            configure = MockPool.call_args.kwargs["configure"]

        conn = MagicMock()
        configure(conn)

        conn.execute.assert_called_once_with("SET statement_timeout = 5000")
        conn.commit.assert_called_once()

        reset_pool()


@pytest.mark.unit
class TestInstrumentedPool:
    def test_connection_is_timed(self):
        from user_directory.infrastructure.db.instrumentation import (
            InstrumentedConnectionPool,
            TimedConnection,
        )

        inner = MagicMock()
        raw_conn = inner.connection.return_value.__enter__.return_value
        pool = InstrumentedConnectionPool(inner)

        with patch(
            "user_directory.infrastructure.db.instrumentation.observe_db_query_duration"
        ) as observe:
            with pool.connection() as conn:
                assert isinstance(conn, TimedConnection)
                conn.execute("select 1")

        raw_conn.execute.assert_called_once_with("select 1")
        assert observe.call_args.args[0] == "SELECT"

    def test_acquire_failure_is_typed(self):
        from user_directory.infrastructure.db.errors import DatabaseConnectionError
        from user_directory.infrastructure.db.instrumentation import (
            InstrumentedConnectionPool,
        )

        inner = MagicMock()
        inner.connection.return_value.__enter__.side_effect = OSError("refused")

        with pytest.raises(DatabaseConnectionError):
            with InstrumentedConnectionPool(inner).connection():
                pass

    @pytest.mark.parametrize(
        "sql,kind",
        [
            ("  insert into users", "INSERT"),
            ("DELETE FROM users", "DELETE"),
            ("", "UNKNOWN"),
        ],
    )
    def test_statement_kind(self, sql, kind):
        from user_directory.infrastructure.db.instrumentation import statement_kind

        assert statement_kind(sql) == kind


@pytest.mark.unit
class TestRepositoryPoolUsage:
    """Test repository uses pool correctly."""

    def test_repository_uses_injected_pool(self):
        from user_directory.infrastructure.repositories.postgres import (
            PostgresUserRepository,
        )

        mock_pool = MagicMock()
        repo = PostgresUserRepository(pool=mock_pool)

        assert repo._get_pool() == mock_pool

    def test_repository_falls_back_to_global_pool(self):
        from user_directory.infrastructure.db.pool import init_pool, reset_pool
        from user_directory.infrastructure.repositories.postgres import (
            PostgresUserRepository,
        )

        reset_pool()

        with patch("user_directory.infrastructure.db.pool.ConnectionPool"):
            pool = init_pool("postgresql://test", min_size=2, max_size=10)

            repo = PostgresUserRepository()  # No pool injected

            assert repo._get_pool() is pool

        reset_pool()
