"""
===============================================================================
CRC CARD — error_mapping.py (use-case error -> HTTP)
===============================================================================

Responsibilities:
  - Translate UserErrorCode into AppHTTPException.
  - Keep the mapping in one place so routers stay thin.

Rules:
  - Use cases return typed errors (code + message + details).
  - The API renders them through crosscutting.error_responses.
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from ....application.usecases.users import UserError, UserErrorCode
from ....crosscutting.error_responses import (
    bad_request,
    conflict,
    internal_error,
    not_found,
    validation_error,
)


def raise_user_error(error: UserError) -> NoReturn:
    details = list(error.details) or None

    if error.code == UserErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message, details)
    if error.code == UserErrorCode.BAD_REQUEST:
        raise bad_request(error.message, details)
    if error.code == UserErrorCode.NOT_FOUND:
        raise not_found(error.message, details)
    if error.code == UserErrorCode.CONFLICT:
        raise conflict(error.message)

    raise internal_error(error.message)
