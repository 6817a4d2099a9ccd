"""
USE CASE: Get User

Resolves a textual id to a stored user.

Errors:
    - BAD_REQUEST: id is not a UUID
    - NOT_FOUND: no live record with that id
"""

from __future__ import annotations

from ....domain.repositories import UserRepository
from ...identifiers import parse_user_id
from ._common import invalid_id_error, not_found_error
from .user_results import UserResult


class GetUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, raw_id: str) -> UserResult:
        user_id = parse_user_id(raw_id)
        if user_id is None:
            return UserResult(error=invalid_id_error(raw_id))

        user = self._users.get_user(user_id)
        if user is None:
            return UserResult(error=not_found_error(user_id))
        return UserResult(user=user)
