"""
===============================================================================
MODULE: Typed internal exceptions
===============================================================================

Goal
----
Keep internal failures consistent:
- stable error_code
- error_id for correlation with logs
- human-readable message (no secrets)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  UserDirectoryError + subclasses

Responsibilities:
  - Standardize internal errors that are later mapped to HTTP
  - Generate error_id for tracing

Collaborators:
  - infrastructure/repositories/postgres/user.py (raises)
  - application/usecases/users (reclassifies DuplicateFingerprintError)
  - api/exception_handlers.py (maps to the error body)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class UserDirectoryError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      UserDirectoryError

    Responsibilities:
      - Base for internal system errors
      - Carry error_code + error_id + message

    Collaborators:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "USER_DIRECTORY_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(UserDirectoryError):
    """DB failures (connection, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class DuplicateFingerprintError(DatabaseError):
    """The users_fingerprint_key unique constraint rejected a write."""

    error_code: str = "DUPLICATE_FINGERPRINT"

    def __init__(
        self,
        fingerprint: str,
        original_error: Exception | None = None,
    ):
        self.fingerprint = fingerprint
        super().__init__(
            "A user with the same details already exists",
            original_error=original_error,
        )
