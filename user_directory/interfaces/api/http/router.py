"""
===============================================================================
CRC CARD — router.py (root router / composition)
===============================================================================

Responsibilities:
  - Define the root APIRouter included by FastAPI.
  - Attach the shared error responses to OpenAPI.
  - Compose feature routers.

Notes:
  - Mounted by user_directory/api/versioning.py under /api/v1 and /v1.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.users import router as users_router


def build_router() -> APIRouter:
    """Build the root v1 router (no import-time side effects beyond routes)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(users_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
