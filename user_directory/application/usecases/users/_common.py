"""Error builders shared by the user use cases."""

from __future__ import annotations

from ...user_validation import UserValidationError
from .user_results import UserError, UserErrorCode

NOT_FOUND_MESSAGE = "No record found"
CONFLICT_MESSAGE = "A user with the same details already exists"
INVALID_ID_MESSAGE = "Invalid user id: expected a UUID"


def invalid_id_error(raw_id: object) -> UserError:
    return UserError(
        code=UserErrorCode.BAD_REQUEST,
        message=INVALID_ID_MESSAGE,
        details=[{"param": "id", "value": str(raw_id)}],
    )


def not_found_error(user_id: object) -> UserError:
    return UserError(
        code=UserErrorCode.NOT_FOUND,
        message=NOT_FOUND_MESSAGE,
        details=[{"id": str(user_id)}],
    )


def conflict_error() -> UserError:
    return UserError(code=UserErrorCode.CONFLICT, message=CONFLICT_MESSAGE)


def validation_error(exc: UserValidationError) -> UserError:
    return UserError(
        code=UserErrorCode.VALIDATION_ERROR,
        message=exc.message,
        details=[v.to_dict() for v in exc.violations],
    )
