"""
===============================================================================
USER USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Why:
    - Use cases return typed results instead of raising for client errors.
    - The HTTP layer maps UserErrorCode to status codes in one place.
    - Flows are testable by result, without HTTP mocks.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Responsibilities:
    - UserErrorCode: stable set of error categories.
    - UserError: minimal error contract (code, message, details).
    - Result DTOs: UserResult, UserPageResult, DeleteUserResult.

Collaborators:
    - domain.entities.User
    - interfaces/api/http/error_mapping.py
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List
from uuid import UUID

from ....domain.entities import User


class UserErrorCode(str, Enum):
    """
    Codes:
      - VALIDATION_ERROR: payload field violations.
      - BAD_REQUEST: malformed id, invalid query parameter, empty body.
      - NOT_FOUND: id does not resolve to a live record.
      - CONFLICT: fingerprint already held by another record.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class UserError:
    code: UserErrorCode
    message: str
    details: List[Any] = field(default_factory=list)


@dataclass
class UserResult:
    """
    Contract:
      - Success: user != None and error == None
      - Failure: user == None and error != None
    """

    user: User | None = None
    error: UserError | None = None


@dataclass
class UserPageResult:
    users: List[User] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 0
    error: UserError | None = None

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return -(-self.total // self.limit)


@dataclass
class DeleteUserResult:
    user_id: UUID | None = None
    deleted: bool = False
    error: UserError | None = None
