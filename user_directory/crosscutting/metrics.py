"""
===============================================================================
FILE: crosscutting/metrics.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Name:
    Metrics (Prometheus)

Responsibilities:
    - Define the Prometheus metrics of the service on a private registry.
    - Provide small, stable helpers to record events and durations.
    - Keep label cardinality low: endpoints are route templates (or
      "unmatched"), never raw paths, user ids or SQL text.
    - Render the /metrics response.

Collaborators:
    - crosscutting.middleware: HTTP request count and latency.
    - application/usecases/users: operation outcomes.
    - infrastructure/repositories/postgres/user.py: query durations.
===============================================================================
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

UNMATCHED_ENDPOINT = "unmatched"

# -----------------------------------------------------------------------------
# HTTP
# -----------------------------------------------------------------------------
_requests_total = Counter(
    "user_directory_requests_total",
    "Total HTTP requests",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "user_directory_request_latency_seconds",
    "HTTP request latency (seconds)",
    ["endpoint", "method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)

# -----------------------------------------------------------------------------
# Use cases
# -----------------------------------------------------------------------------
_user_operations_total = Counter(
    "user_directory_user_operations_total",
    "User operations by outcome",
    ["operation", "outcome"],
    registry=_registry,
)

# -----------------------------------------------------------------------------
# DB (low cardinality)
# -----------------------------------------------------------------------------
_db_query_duration = Histogram(
    "user_directory_db_query_duration_seconds",
    "DB query duration (seconds)",
    ["kind"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
    registry=_registry,
)


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Record HTTP metrics.

    - endpoint is normalized to keep cardinality bounded.
    - status is bucketed into 2xx/3xx/4xx/5xx.
    """
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized,
        method=method,
        status=_status_bucket(status_code),
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def endpoint_label(scope: Mapping[str, Any]) -> str:
    """Route template for the request, or `unmatched` when no route matched."""
    template = getattr(scope.get("route"), "path", None)
    if not template:
        return UNMATCHED_ENDPOINT
    return _normalize_endpoint(template)


def record_user_operation(operation: str, outcome: str) -> None:
    """Count a use-case execution, e.g. ("create", "conflict")."""
    _user_operations_total.labels(
        operation=operation, outcome=(outcome or "unknown").lower()
    ).inc()


def observe_db_query_duration(kind: str, seconds: float) -> None:
    """Observe a DB query duration. `kind` must be low cardinality (SELECT/INSERT/...)."""
    _db_query_duration.labels(kind=(kind or "UNKNOWN").upper()).observe(seconds)


# -----------------------------------------------------------------------------
# Internal helpers
# -----------------------------------------------------------------------------

_USER_ID_SEGMENT = re.compile(r"/users/[^/]+")


def _normalize_endpoint(path: str) -> str:
    """Collapse the user id segment into `{user_id}`."""
    return _USER_ID_SEGMENT.sub("/users/{user_id}", path)


def _status_bucket(code: int) -> str:
    if 200 <= code < 300:
        return "2xx"
    if 300 <= code < 400:
        return "3xx"
    if 400 <= code < 500:
        return "4xx"
    if 500 <= code < 600:
        return "5xx"
    return "other"


# -----------------------------------------------------------------------------
# /metrics endpoint
# -----------------------------------------------------------------------------


def get_metrics_response() -> tuple[bytes, str]:
    """Body and content type for /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
