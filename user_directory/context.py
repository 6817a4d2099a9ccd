"""
===============================================================================
CRC CARD — user_directory/context.py (Per-request context)
===============================================================================

Responsibilities:
  - Hold request-scoped context in ContextVars (async-safe).
  - Let logs and metrics correlate a request without threading parameters
    through every layer.
  - Provide minimal helpers: set_request_context(), get_context_dict(),
    clear_context().

Collaborators:
  - crosscutting.middleware: sets request_id/method/path when a request starts.
  - crosscutting.logger: enriches log lines through get_context_dict().
  - api.exception_handlers: echoes request_id into error details.

Constraints:
  - Only primitive values (str) so the context is always JSON-safe.
  - Empty-string defaults instead of None.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

# =============================================================================
# ContextVars
# =============================================================================

# Request identifier (X-Request-Id header or generated UUID).
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Basic HTTP metadata for logs.
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_METHOD: Final[str] = "method"
_CTX_PATH: Final[str] = "path"


# =============================================================================
# Public API
# =============================================================================


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Set the request context. Empty strings mean "not available"."""
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def get_context_dict() -> dict[str, str]:
    """Return the current context as a dict, skipping empty keys."""
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := http_method_var.get():
        ctx[_CTX_METHOD] = val
    if val := http_path_var.get():
        ctx[_CTX_PATH] = val

    return ctx


def clear_context() -> None:
    """Reset the context at the end of a request so nothing leaks into the next one."""
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
