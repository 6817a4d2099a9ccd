"""
===============================================================================
USE CASE: Update User
===============================================================================

Business Goal:
    Overwrite every mutable field of an existing user in place. The id never
    changes; the fingerprint is recomputed and re-checked.

Flow (first failing step wins; nothing is written on failure):
    1) id shape             -> BAD_REQUEST
    2) empty body           -> BAD_REQUEST
    3) payload validation   -> VALIDATION_ERROR
    4) existence            -> NOT_FOUND
    5) fingerprint held by a DIFFERENT user -> CONFLICT
    6) overwrite; a vanished row is NOT_FOUND, a constraint race is CONFLICT

Collaborators:
    - UserRepository: get_user, get_user_by_fingerprint, update_user
    - create_user.prepare_profile (shared validate + sanitize)
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping

from ....crosscutting.exceptions import DuplicateFingerprintError
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_user_operation
from ....domain.repositories import UserRepository
from ...fingerprint import user_fingerprint
from ...identifiers import parse_user_id
from ...user_validation import UserValidationError
from ._common import conflict_error, invalid_id_error, not_found_error, validation_error
from .create_user import prepare_profile
from .user_results import UserError, UserErrorCode, UserResult

EMPTY_BODY_MESSAGE = "Request body must not be empty"


def _is_empty(payload: Any) -> bool:
    if payload is None:
        return True
    return isinstance(payload, Mapping) and len(payload) == 0


class UpdateUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, raw_id: str, payload: Any) -> UserResult:
        user_id = parse_user_id(raw_id)
        if user_id is None:
            return UserResult(error=invalid_id_error(raw_id))

        if _is_empty(payload):
            return UserResult(
                error=UserError(code=UserErrorCode.BAD_REQUEST, message=EMPTY_BODY_MESSAGE)
            )

        try:
            profile = prepare_profile(payload)
        except UserValidationError as exc:
            record_user_operation("update", "invalid")
            return UserResult(error=validation_error(exc))

        current = self._users.get_user(user_id)
        if current is None:
            return UserResult(error=not_found_error(user_id))

        fingerprint = user_fingerprint(profile)
        holder = self._users.get_user_by_fingerprint(fingerprint)
        if holder is not None and holder.id != user_id:
            return self._conflict(user_id)

        try:
            updated = self._users.update_user(current.with_profile(profile, fingerprint))
        except DuplicateFingerprintError:
            return self._conflict(user_id)

        if updated is None:
            return UserResult(error=not_found_error(user_id))

        logger.info("user updated", extra={"user_id": str(user_id)})
        record_user_operation("update", "ok")
        return UserResult(user=updated)

    @staticmethod
    def _conflict(user_id) -> UserResult:
        logger.info("user update conflict", extra={"user_id": str(user_id)})
        record_user_operation("update", "conflict")
        return UserResult(error=conflict_error())
