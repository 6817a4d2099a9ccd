"""
===============================================================================
CRC CARD — api/versioning.py (route prefixes)
===============================================================================

Responsibilities:
  - Mount the business router under its public prefixes without
    duplicating logic.

Currently:
  - /api/v1/... (canonical, used by the browser client)
  - /v1/...     (short alias)
===============================================================================
"""

from __future__ import annotations

from fastapi import FastAPI

from ..interfaces.api.http.router import router as business_router

API_PREFIXES = ("/api/v1", "/v1")


def include_versioned_routes(app: FastAPI) -> None:
    for prefix in API_PREFIXES:
        app.include_router(business_router, prefix=prefix)


__all__ = ["API_PREFIXES", "include_versioned_routes"]
