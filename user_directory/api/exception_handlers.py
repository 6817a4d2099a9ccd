"""
===============================================================================
CRC CARD — api/exception_handlers.py (centralized exception handling)
===============================================================================

Responsibilities:
  - Translate application and framework exceptions into the shared error
    body ({error, message, details, code, status}).
  - Log failures with request_id + error_id.
  - Never leak internals in production.

Mapping:
  - AppHTTPException            -> its own status/code
  - unmatched route / method    -> 404 with a usage hint
  - malformed JSON / params     -> 400
  - DuplicateFingerprintError   -> 409 (race that escaped a use case)
  - DatabaseError               -> 500, generic message + error_id
  - anything else               -> 500, generic message

Collaborators:
  - crosscutting.error_responses
  - crosscutting.exceptions
  - crosscutting.config.get_settings (detail level)
===============================================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..crosscutting.error_responses import (
    GENERIC_INTERNAL_MESSAGE,
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    build_error_response,
    generic_exception_handler,
)
from ..crosscutting.exceptions import DatabaseError, DuplicateFingerprintError
from ..crosscutting.logger import logger

USAGE_HINT = (
    "If you are attempting to UPDATE or DELETE, ensure the user id is appended "
    "to the URL (e.g., /api/v1/users/<uuid>)."
)

_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.BAD_REQUEST,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    413: ErrorCode.PAYLOAD_TOO_LARGE,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def endpoint_not_found_message(method: str, path: str) -> str:
    return f"The {method} request to {path} is invalid. {USAGE_HINT}"


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework HTTP errors; 404/405 become an endpoint-not-found with a hint."""
    if exc.status_code in (404, 405):
        path = request.url.path
        return build_error_response(
            404,
            ErrorCode.NOT_FOUND,
            endpoint_not_found_message(request.method, path),
            [{"method": request.method, "path": path}],
            request_id=_request_id_from(request),
        )

    code = _STATUS_CODES.get(
        exc.status_code,
        ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.BAD_REQUEST,
    )
    return build_error_response(
        exc.status_code,
        code,
        str(exc.detail),
        request_id=_request_id_from(request),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return build_error_response(
            400,
            ErrorCode.BAD_REQUEST,
            "Malformed JSON body",
            request_id=_request_id_from(request),
        )

    details: list[Any] = [
        {
            "field": ".".join(str(p) for p in e.get("loc", ())[1:]) or "request",
            "message": e.get("msg", "invalid value"),
        }
        for e in errors
    ]
    return build_error_response(
        400,
        ErrorCode.VALIDATION_ERROR,
        details[0]["message"] if details else "Invalid request",
        details,
        request_id=_request_id_from(request),
    )


async def duplicate_fingerprint_handler(
    request: Request, exc: DuplicateFingerprintError
) -> JSONResponse:
    logger.info("duplicate fingerprint reached the API layer")
    return build_error_response(
        409,
        ErrorCode.CONFLICT,
        exc.message,
        request_id=_request_id_from(request),
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    request_id = _request_id_from(request)
    logger.error(
        "Database error",
        extra={
            "code": exc.error_code,
            "error_id": exc.error_id,
            "reason": exc.message,
            "request_id": request_id,
        },
    )
    return build_error_response(
        500,
        ErrorCode.INTERNAL_ERROR,
        GENERIC_INTERNAL_MESSAGE,
        [{"error_id": exc.error_id}],
        request_id=request_id,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={"request_id": _request_id_from(request)},
    )
    return await generic_exception_handler(request, exc)


def register_exception_handlers(app) -> None:
    """
    Register handlers on the FastAPI app.

    AppHTTPException is registered explicitly so it wins over the generic
    Starlette HTTPException handler; Exception is the last fallback.
    """
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DuplicateFingerprintError, duplicate_fingerprint_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers", "endpoint_not_found_message", "USAGE_HINT"]
