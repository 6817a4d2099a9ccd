"""
============================================================
CRC CARD — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Run parameterized SQL against the `users` table.
  - Map raw rows -> domain `User`, strictly validating enum columns.
  - Turn the fingerprint unique violation into DuplicateFingerprintError.
  - Surface every other failure as DatabaseError with structured logging.

Collaborators:
  - psycopg_pool.ConnectionPool (through infrastructure.db.pool.get_pool)
  - postgres/user_query_builder.py (listing SQL)
  - crosscutting.exceptions.DatabaseError / DuplicateFingerprintError

Constraints / Notes:
  - Pure repository: no business rules.
  - Returns None / False when the resource does not exist.
  - Always parameterized SQL, never interpolated input.
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID

from psycopg import errors as pg_errors

from ....crosscutting.exceptions import DatabaseError, DuplicateFingerprintError
from ....crosscutting.logger import logger
from ....domain.entities import User, UserGender, UserStatus
from ....domain.value_objects import UserListCriteria, UserPage
from ...db.schema import FINGERPRINT_CONSTRAINT
from .user_query_builder import USER_COLUMNS, build_list_queries


def _row_to_user(row: tuple) -> User:
    """
    Convert a `users` row into a domain User.

    Enum casting is strict: a value outside the enums means schema drift.
    """
    try:
        gender = UserGender(row[4])
        status = UserStatus(row[5])
    except ValueError as exc:
        raise DatabaseError(
            f"Invalid enum value in users row {row[0]}", original_error=exc
        ) from exc

    return User(
        id=row[0] if isinstance(row[0], UUID) else UUID(str(row[0])),
        first_name=row[1],
        last_name=row[2],
        email=row[3],
        gender=gender,
        status=status,
        fingerprint=str(row[6]).strip(),
        created_at=row[7],
        updated_at=row[8],
    )


def _is_fingerprint_violation(exc: Exception) -> bool:
    if not isinstance(exc, pg_errors.UniqueViolation):
        return False
    diag = getattr(exc, "diag", None)
    return getattr(diag, "constraint_name", None) == FINGERPRINT_CONSTRAINT


class PostgresUserRepository:
    """
    PostgreSQL repository for users.

    The pool is injectable for tests; by default the process-wide pool from
    infrastructure.db.pool is used.
    """

    def __init__(self, pool=None) -> None:
        self._pool = pool

    def _get_pool(self):
        if self._pool is not None:
            return self._pool
        from ...db.pool import get_pool

        return get_pool()

    # =========================================================
    # Execution helpers (consistent logging + DatabaseError)
    # =========================================================
    def _fetchone(
        self,
        *,
        query: str,
        params: Iterable[object],
        log_msg: str,
        log_extra: dict[str, object],
        fingerprint: str | None = None,
    ) -> tuple | None:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except DatabaseError:
            raise
        except Exception as exc:
            if fingerprint is not None and _is_fingerprint_violation(exc):
                logger.info(
                    "PostgresUserRepository: fingerprint already taken",
                    extra=log_extra,
                )
                raise DuplicateFingerprintError(fingerprint, original_error=exc) from exc
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}", original_error=exc) from exc

    # =========================================================
    # Repository API
    # =========================================================
    def create_user(self, user: User) -> User:
        row = self._fetchone(
            query=f"""
                INSERT INTO users
                    (id, first_name, last_name, email, gender, status, fingerprint)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING {USER_COLUMNS}
            """,
            params=(
                user.id,
                user.first_name,
                user.last_name,
                user.email,
                user.gender.value,
                user.status.value,
                user.fingerprint,
            ),
            log_msg="PostgresUserRepository: create_user failed",
            log_extra={"user_id": str(user.id)},
            fingerprint=user.fingerprint,
        )
        if row is None:
            raise DatabaseError("PostgresUserRepository: INSERT returned no row")
        return _row_to_user(row)

    def get_user(self, user_id: UUID) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            log_msg="PostgresUserRepository: get_user failed",
            log_extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def get_user_by_fingerprint(self, fingerprint: str) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {USER_COLUMNS} FROM users WHERE fingerprint = %s",
            params=(fingerprint,),
            log_msg="PostgresUserRepository: get_user_by_fingerprint failed",
            log_extra={},
        )
        return _row_to_user(row) if row else None

    def update_user(self, user: User) -> Optional[User]:
        row = self._fetchone(
            query=f"""
                UPDATE users
                SET first_name = %s,
                    last_name = %s,
                    email = %s,
                    gender = %s,
                    status = %s,
                    fingerprint = %s,
                    updated_at = NOW()
                WHERE id = %s
                RETURNING {USER_COLUMNS}
            """,
            params=(
                user.first_name,
                user.last_name,
                user.email,
                user.gender.value,
                user.status.value,
                user.fingerprint,
                user.id,
            ),
            log_msg="PostgresUserRepository: update_user failed",
            log_extra={"user_id": str(user.id)},
            fingerprint=user.fingerprint,
        )
        return _row_to_user(row) if row else None

    def delete_user(self, user_id: UUID) -> bool:
        row = self._fetchone(
            query="DELETE FROM users WHERE id = %s RETURNING id",
            params=(user_id,),
            log_msg="PostgresUserRepository: delete_user failed",
            log_extra={"user_id": str(user_id)},
        )
        return row is not None

    def list_users(self, criteria: UserListCriteria) -> UserPage:
        """
        Count + page query on the same connection.

        Both statements share the WHERE clause built from the criteria.
        """
        queries = build_list_queries(criteria)
        log_extra = {
            "sort_field": criteria.sort_field.value,
            "sort_order": criteria.sort_order.value,
            "page": criteria.page,
            "limit": criteria.limit,
        }
        try:
            with self._get_pool().connection() as conn:
                count_row = conn.execute(
                    queries.count.sql, queries.count.params
                ).fetchone()
                rows = conn.execute(queries.select.sql, queries.select.params).fetchall()
        except DatabaseError:
            raise
        except Exception as exc:
            logger.exception(
                "PostgresUserRepository: list_users failed",
                extra={**log_extra, "error": str(exc)},
            )
            raise DatabaseError(
                f"PostgresUserRepository: list_users failed: {exc}",
                original_error=exc,
            ) from exc

        total = int(count_row[0]) if count_row else 0
        return UserPage(items=[_row_to_user(r) for r in rows], total=total)

    def ping(self) -> bool:
        try:
            with self._get_pool().connection() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception as exc:
            logger.warning("PostgresUserRepository: ping failed", extra={"error": str(exc)})
            return False
