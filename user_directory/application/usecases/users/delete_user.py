"""
USE CASE: Delete User

Hard delete; the fingerprint is released with the row.

Errors:
    - BAD_REQUEST: id is not a UUID
    - NOT_FOUND: nothing was deleted
"""

from __future__ import annotations

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_user_operation
from ....domain.repositories import UserRepository
from ...identifiers import parse_user_id
from ._common import invalid_id_error, not_found_error
from .user_results import DeleteUserResult


class DeleteUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, raw_id: str) -> DeleteUserResult:
        user_id = parse_user_id(raw_id)
        if user_id is None:
            return DeleteUserResult(error=invalid_id_error(raw_id))

        if not self._users.delete_user(user_id):
            return DeleteUserResult(user_id=user_id, error=not_found_error(user_id))

        logger.info("user deleted", extra={"user_id": str(user_id)})
        record_user_operation("delete", "ok")
        return DeleteUserResult(user_id=user_id, deleted=True)
