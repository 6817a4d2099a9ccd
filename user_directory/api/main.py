"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI application (create_app) with metadata
  - Configure middleware (CORS, request context, body limit)
  - Mount the users router under /api/v1 and /v1
  - Expose health, readiness and metrics endpoints
  - Own the startup/shutdown lifecycle (pool, schema bootstrap, dev seed)

Collaborators:
  - crosscutting.config.get_settings
  - infrastructure.db.pool (init/close), infrastructure.db.schema
  - application.dev_seed_users.ensure_dev_users
  - container (repository + use case factories)

Notes:
  - Middleware order (last added runs first):
      RequestContext -> CORS -> BodyLimit -> routes
  - APP_ENV=test/ci skips the pool entirely (in-memory repository)
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..application.dev_seed_users import ensure_dev_users
from ..container import get_create_user_use_case, get_user_repository
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.error_responses import service_unavailable
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import (
    REQUEST_ID_HEADER,
    BodyLimitMiddleware,
    RequestContextMiddleware,
)
from ..infrastructure.db.pool import close_pool, init_pool
from ..infrastructure.db.schema import ensure_schema
from .exception_handlers import register_exception_handlers
from .versioning import API_PREFIXES, include_versioned_routes

APP_TITLE = "User Directory API"
APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: pool, optional schema bootstrap, dev seed."""
    settings = get_settings()
    uses_pool = not settings.uses_in_memory_storage()

    if uses_pool:
        pool = init_pool(
            settings.database_url,
            settings.db_pool_min_size,
            settings.db_pool_max_size,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )
        if settings.db_ensure_schema:
            ensure_schema(pool)

    try:
        ensure_dev_users(settings, get_create_user_use_case())

        logger.info(
            "User Directory API starting up",
            extra={
                "app_env": settings.app_env,
                "storage": "postgres" if uses_pool else "in_memory",
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
                "endpoints": [f"{prefix}/users" for prefix in API_PREFIXES],
            },
        )

        yield

    finally:
        if uses_pool:
            close_pool()
        logger.info("User Directory API shutting down")


def _db_status() -> str:
    if get_user_repository().ping():
        return "connected"
    return "disconnected"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "users", "description": "User directory CRUD"},
            {"name": "ops", "description": "Health, readiness and metrics"},
        ],
    )

    # R: Middleware order (last added = outermost)
    app.add_middleware(BodyLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestContextMiddleware)

    include_versioned_routes(app)
    register_exception_handlers(app)

    @app.get("/healthz", tags=["ops"])
    def healthz(request: Request):
        """
        R: Liveness plus a storage ping.

        Returns:
            ok: True when the storage answered
            db: "connected" or "disconnected"
            request_id: correlation id of this request
        """
        db_status = _db_status()
        return {
            "ok": db_status == "connected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/readyz", tags=["ops"])
    def readyz(request: Request):
        """R: Readiness; 503 (error body) until the storage answers."""
        db_status = _db_status()
        if db_status != "connected":
            raise service_unavailable("database", [{"db": db_status}])
        return {
            "ok": True,
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/metrics", tags=["ops"])
    def metrics():
        """R: Prometheus text format."""
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
