"""
===============================================================================
MODULE: HTTP middlewares (request context + payload limits)
===============================================================================

Goal
----
1) RequestContextMiddleware:
   - Generate/propagate request_id
   - Set contextvars (method/path)
   - Per-request log line and metrics

2) BodyLimitMiddleware:
   - Reject oversized payloads (Content-Length and chunked bodies)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Components:
  - RequestContextMiddleware
  - BodyLimitMiddleware

Collaborators:
  - user_directory/context.py
  - crosscutting/metrics.py
  - crosscutting/error_responses.py
===============================================================================
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .error_responses import ErrorCode, ErrorDetail, error_title, payload_too_large
from .logger import logger
from .metrics import endpoint_label, record_request_metrics

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_LENGTH = 128


def _accept_request_id(value: str) -> str:
    value = (value or "").strip()
    if value and len(value) <= _MAX_REQUEST_ID_LENGTH:
        return value
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      RequestContextMiddleware

    Responsibilities:
      - Accept or generate X-Request-Id and echo it on the response
      - Set contextvars for log correlation
      - Emit a log line and metrics per request
      - Always clear_context() at the end

    Collaborators:
      - crosscutting.metrics.record_request_metrics
      - crosscutting.logger
    ----------------------------------------------------------------------------
    """

    _QUIET_PATHS = {"/healthz", "/readyz", "/metrics"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _accept_request_id(request.headers.get(REQUEST_ID_HEADER, ""))
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        request.state.request_id = request_id

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            logger.exception(
                "request failed",
                extra={
                    "status_code": 500,
                    "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            raise
        finally:
            latency = time.perf_counter() - start
            record_request_metrics(
                endpoint=endpoint_label(request.scope),
                method=request.method,
                status_code=status_code,
                latency_seconds=latency,
            )

            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completed",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round(latency * 1000, 2),
                    },
                )

            clear_context()


class BodyLimitMiddleware:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      BodyLimitMiddleware

    Responsibilities:
      - Reject requests whose body exceeds max_body_bytes with 413
      - Works with Content-Length and with chunked transfer

    Collaborators:
      - crosscutting.config.get_settings()
      - crosscutting.error_responses (body shape)
    ----------------------------------------------------------------------------
    """

    def __init__(self, app, max_body_bytes: int | None = None):
        if max_body_bytes is None:
            from .config import get_settings

            max_body_bytes = get_settings().max_body_bytes
        self.app = app
        self._max_bytes = max_body_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = {
            k.decode("latin-1").lower(): v.decode("latin-1")
            for k, v in scope.get("headers", [])
        }
        path = scope.get("path", "")
        request_id = _accept_request_id(headers.get("x-request-id", ""))

        content_length = headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > self._max_bytes:
                logger.warning(
                    "payload too large (content-length)",
                    extra={
                        "content_length": content_length,
                        "max_bytes": self._max_bytes,
                        "path": path,
                    },
                )
                await self._send_413(send, request_id=request_id)
                return

        received = 0

        async def receive_limited():
            # Surfaces through the AppHTTPException handler as a 413.
            nonlocal received
            msg = await receive()
            if msg["type"] == "http.request":
                received += len(msg.get("body", b"") or b"")
                if received > self._max_bytes:
                    logger.warning(
                        "payload too large (streaming)",
                        extra={
                            "received_bytes": received,
                            "max_bytes": self._max_bytes,
                            "path": path,
                        },
                    )
                    raise payload_too_large(self._max_bytes)
            return msg

        await self.app(scope, receive_limited, send)

    async def _send_413(self, send, *, request_id: str) -> None:
        body = ErrorDetail(
            error=error_title(ErrorCode.PAYLOAD_TOO_LARGE),
            message=str(payload_too_large(self._max_bytes).detail),
            details=[{"request_id": request_id}],
            code=ErrorCode.PAYLOAD_TOO_LARGE,
            status=413,
        ).model_dump(mode="json", exclude_none=True)

        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"x-request-id", request_id.encode("latin-1")),
                ],
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": json.dumps(body, ensure_ascii=False).encode("utf-8"),
            }
        )
