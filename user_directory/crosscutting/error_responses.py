"""
===============================================================================
MODULE: Standard error responses
===============================================================================

Goal
----
Every HTTP error leaves the service with the same body so that:
- the browser client can branch on "code"
- operators can correlate by request_id
- the API stays consistent

Body shape:
  {"error": <title>, "message": <primary message>, "details": [...]?,
   "code": <stable code>, "status": <http status>}

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  AppHTTPException + handlers

Responsibilities:
  - Define the error code catalog (ErrorCode)
  - Build the error payload (ErrorDetail)
  - Provide factories for frequent errors
  - Provide FastAPI handlers that render the payload

Collaborators:
  - crosscutting/middleware.py (request_id, 413 rendering)
  - interfaces/api/http/error_mapping.py (use-case errors -> AppHTTPException)
  - api/exception_handlers.py (registers the handlers)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


_TITLES: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_ERROR: "Validation Error",
    ErrorCode.BAD_REQUEST: "Bad Request",
    ErrorCode.NOT_FOUND: "Not Found",
    ErrorCode.CONFLICT: "Conflict",
    ErrorCode.PAYLOAD_TOO_LARGE: "Payload Too Large",
    ErrorCode.INTERNAL_ERROR: "Internal Server Error",
    ErrorCode.SERVICE_UNAVAILABLE: "Service Unavailable",
}

GENERIC_INTERNAL_MESSAGE = "An unexpected error occurred"


def error_title(code: ErrorCode) -> str:
    return _TITLES.get(code, code.value.replace("_", " ").title())


class ErrorDetail(BaseModel):
    """
    Error body.

    Fields:
    - error: short title ("Not Found", "Conflict", ...)
    - message: primary human-readable message
    - details: optional list (per-field violations, allowed values, request id)
    - code: stable error code for clients
    - status: HTTP status, repeated in the body
    """

    error: str
    message: str
    details: list[Any] | None = None
    code: ErrorCode
    status: int


_OPENAPI_ERROR_CONTENT = {
    "application/json": {"schema": {"$ref": "#/components/schemas/ErrorDetail"}}
}

OPENAPI_ERROR_RESPONSES = {
    "400": {
        "description": "Bad Request / Validation Error",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    },
    "404": {
        "description": "Not Found",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    },
    "409": {
        "description": "Conflict",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    },
    "413": {
        "description": "Payload Too Large",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    },
    "default": {
        "description": "Error",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    },
}


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      AppHTTPException

    Responsibilities:
      - Attach a stable ErrorCode
      - Carry detail entries (field violations, allowed values)

    Collaborators:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[Any] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Error factories
# ---------------------------------------------------------------------------
def validation_error(detail: str, errors: list[Any] | None = None) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors)


def bad_request(detail: str, errors: list[Any] | None = None) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.BAD_REQUEST, detail, errors)


def not_found(detail: str, errors: list[Any] | None = None) -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail, errors)


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def payload_too_large(max_bytes: int) -> AppHTTPException:
    return AppHTTPException(
        413,
        ErrorCode.PAYLOAD_TOO_LARGE,
        f"Request body too large. Maximum allowed: {max_bytes} bytes",
    )


def internal_error(detail: str = GENERIC_INTERNAL_MESSAGE) -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def service_unavailable(
    service: str, errors: list[Any] | None = None
) -> AppHTTPException:
    return AppHTTPException(
        503,
        ErrorCode.SERVICE_UNAVAILABLE,
        f"Service temporarily unavailable: {service}",
        errors,
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------
def _request_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def build_error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    details: list[Any] | None = None,
    *,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an error body; request_id is appended to details when known."""
    entries = list(details or [])
    if request_id:
        entries.append({"request_id": request_id})

    error = ErrorDetail(
        error=error_title(code),
        message=message,
        details=entries or None,
        code=code,
        status=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Handler for AppHTTPException; propagates optional headers."""
    return build_error_response(
        exc.status_code,
        exc.code,
        str(exc.detail),
        exc.errors,
        request_id=_request_id(request),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Fallback handler for unhandled exceptions.

    The exception text is only exposed outside production.
    """
    from .config import get_settings

    details: list[Any] = []
    try:
        expose = not get_settings().is_production()
    except Exception:
        expose = False
    if expose:
        details.append({"exception": type(exc).__name__, "reason": str(exc)})

    return build_error_response(
        500,
        ErrorCode.INTERNAL_ERROR,
        GENERIC_INTERNAL_MESSAGE,
        details,
        request_id=_request_id(request),
    )
