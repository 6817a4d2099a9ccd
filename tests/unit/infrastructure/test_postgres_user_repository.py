"""
Name: PostgresUserRepository Unit Tests

Responsibilities:
  - Row mapping (strict enums)
  - Unique-violation translation on the fingerprint constraint
  - DatabaseError wrapping for every other failure

Notes:
  - Offline: the pool is a MagicMock injected through the constructor.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from psycopg import errors as pg_errors

from user_directory.crosscutting.exceptions import (
    DatabaseError,
    DuplicateFingerprintError,
)
from user_directory.domain.entities import UserGender, UserStatus
from user_directory.domain.value_objects import UserListCriteria
from user_directory.infrastructure.repositories.postgres import PostgresUserRepository

pytestmark = pytest.mark.unit


class _FingerprintViolation(pg_errors.UniqueViolation):
    diag = SimpleNamespace(constraint_name="users_fingerprint_key")


class _OtherViolation(pg_errors.UniqueViolation):
    diag = SimpleNamespace(constraint_name="users_pkey")


def _row(user_id=None, gender="Female", status="Active"):
    now = datetime.now(timezone.utc)
    return (
        user_id or uuid4(),
        "Ada",
        "Lovelace",
        "ada.lovelace@example.com",
        gender,
        status,
        "a" * 64 + "  ",
        now,
        now,
    )


@pytest.fixture
def pool():
    return MagicMock()


@pytest.fixture
def conn(pool):
    return pool.connection.return_value.__enter__.return_value


@pytest.fixture
def repo(pool):
    return PostgresUserRepository(pool=pool)


class TestReads:
    def test_get_user_maps_row(self, repo, conn):
        user_id = uuid4()
        conn.execute.return_value.fetchone.return_value = _row(user_id)

        user = repo.get_user(user_id)

        assert user.id == user_id
        assert user.gender == UserGender.FEMALE
        assert user.status == UserStatus.ACTIVE
        assert user.fingerprint == "a" * 64
        assert conn.execute.call_args.args[1] == (user_id,)

    def test_get_user_missing(self, repo, conn):
        conn.execute.return_value.fetchone.return_value = None
        assert repo.get_user(uuid4()) is None

    def test_unknown_enum_value_is_database_error(self, repo, conn):
        conn.execute.return_value.fetchone.return_value = _row(gender="Robot")
        with pytest.raises(DatabaseError, match="Invalid enum value"):
            repo.get_user(uuid4())

    def test_list_users_runs_count_then_page(self, repo, conn):
        count_cursor = MagicMock()
        count_cursor.fetchone.return_value = (7,)
        page_cursor = MagicMock()
        page_cursor.fetchall.return_value = [_row(), _row()]
        conn.execute.side_effect = [count_cursor, page_cursor]

        page = repo.list_users(UserListCriteria(page=2, limit=2))

        assert page.total == 7
        assert len(page.items) == 2
        count_sql = conn.execute.call_args_list[0].args[0]
        select_params = conn.execute.call_args_list[1].args[1]
        assert count_sql.startswith("SELECT COUNT(*)")
        assert select_params == (2, 2)


class TestWrites:
    def test_create_user(self, repo, conn, user_factory):
        user = user_factory()
        conn.execute.return_value.fetchone.return_value = _row(user.id)

        stored = repo.create_user(user)

        params = conn.execute.call_args.args[1]
        assert stored.id == user.id
        assert params[0] == user.id
        assert params[4:] == ("Female", "Active", user.fingerprint)

    def test_create_fingerprint_violation(self, repo, conn, user_factory):
        conn.execute.side_effect = _FingerprintViolation("duplicate key")

        with pytest.raises(DuplicateFingerprintError):
            repo.create_user(user_factory())

    def test_other_unique_violation_is_database_error(self, repo, conn, user_factory):
        conn.execute.side_effect = _OtherViolation("duplicate key")

        with pytest.raises(DatabaseError) as exc_info:
            repo.create_user(user_factory())

        assert not isinstance(exc_info.value, DuplicateFingerprintError)

    def test_update_fingerprint_violation(self, repo, conn, user_factory):
        conn.execute.side_effect = _FingerprintViolation("duplicate key")

        with pytest.raises(DuplicateFingerprintError):
            repo.update_user(user_factory())

    def test_update_missing_returns_none(self, repo, conn, user_factory):
        conn.execute.return_value.fetchone.return_value = None
        assert repo.update_user(user_factory()) is None

    @pytest.mark.parametrize("row,expected", [((uuid4(),), True), (None, False)])
    def test_delete_user(self, repo, conn, row, expected):
        conn.execute.return_value.fetchone.return_value = row
        assert repo.delete_user(uuid4()) is expected

    def test_driver_failure_is_wrapped(self, repo, conn):
        conn.execute.side_effect = pg_errors.OperationalError("server closed")

        with pytest.raises(DatabaseError) as exc_info:
            repo.get_user(uuid4())

        assert isinstance(exc_info.value.original_error, pg_errors.OperationalError)


class TestPing:
    def test_ping_ok(self, repo, conn):
        assert repo.ping() is True
        conn.execute.assert_called_once_with("SELECT 1")

    def test_ping_failure(self, repo, pool):
        pool.connection.side_effect = OSError("refused")
        assert repo.ping() is False
