"""
===============================================================================
USE CASE: Create User
===============================================================================

Business Goal:
    Register a new user while guaranteeing that no two live records share a
    fingerprint.

Flow:
    validate payload -> sanitize names -> fingerprint (status excluded)
    -> conflict pre-check -> persist with a new uuid4 -> stored record

Error Mapping:
    - VALIDATION_ERROR: payload violations (full list in details)
    - CONFLICT: fingerprint already held, either found by the pre-check or
      raised by the storage unique constraint under a race

Collaborators:
    - UserRepository: get_user_by_fingerprint, create_user
    - user_validation.validate_user_payload
    - sanitizer.sanitize_name
    - fingerprint.user_fingerprint
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any
from uuid import uuid4

from ....crosscutting.exceptions import DuplicateFingerprintError
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_user_operation
from ....domain.entities import User, UserProfile
from ....domain.repositories import UserRepository
from ...fingerprint import user_fingerprint
from ...sanitizer import sanitize_name
from ...user_validation import UserValidationError, validate_user_payload
from ._common import conflict_error, validation_error
from .user_results import UserResult


def prepare_profile(payload: Any) -> UserProfile:
    """Validate then sanitize the name fields. Raises UserValidationError."""
    profile = validate_user_payload(payload)
    return replace(
        profile,
        first_name=sanitize_name(profile.first_name),
        last_name=sanitize_name(profile.last_name),
    )


class CreateUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, payload: Any) -> UserResult:
        try:
            profile = prepare_profile(payload)
        except UserValidationError as exc:
            record_user_operation("create", "invalid")
            return UserResult(error=validation_error(exc))

        fingerprint = user_fingerprint(profile)
        if self._users.get_user_by_fingerprint(fingerprint) is not None:
            return self._conflict(fingerprint)

        user = User.from_profile(uuid4(), profile, fingerprint)
        try:
            created = self._users.create_user(user)
        except DuplicateFingerprintError:
            return self._conflict(fingerprint)

        logger.info("user created", extra={"user_id": str(created.id)})
        record_user_operation("create", "ok")
        return UserResult(user=created)

    @staticmethod
    def _conflict(fingerprint: str) -> UserResult:
        logger.info("user create conflict", extra={"fingerprint": fingerprint})
        record_user_operation("create", "conflict")
        return UserResult(error=conflict_error())
