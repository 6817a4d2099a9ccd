"""
Name: API Error Handling and Ops Endpoint Tests

Responsibilities:
  - Unknown routes / wrong methods -> 404 with a usage hint
  - Malformed JSON, oversized bodies, unexpected and storage failures
  - Request id propagation and the health/readiness/metrics endpoints
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from user_directory.api.exception_handlers import USAGE_HINT
from user_directory.api.main import create_app
from user_directory.container import get_get_user_use_case, get_user_repository
from user_directory.crosscutting.config import Settings
from user_directory.crosscutting.exceptions import DatabaseError

pytestmark = pytest.mark.unit


class TestRouting:
    def test_unknown_route(self, client):
        response = client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert USAGE_HINT in body["message"]
        assert {"method": "GET", "path": "/api/v1/nothing-here"} in body["details"]

    @pytest.mark.parametrize("method", ["put", "delete"])
    def test_write_without_id_is_not_found(self, client, method):
        response = getattr(client, method)("/api/v1/users")

        assert response.status_code == 404
        assert response.json()["message"].startswith(
            f"The {method.upper()} request to /api/v1/users is invalid."
        )


class TestBodies:
    def test_malformed_json(self, client):
        response = client.post(
            "/api/v1/users",
            content=b'{"first_name": "Ada",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"
        assert response.json()["message"] == "Malformed JSON body"

    def test_payload_too_large(self, in_memory_repo):
        app = create_app(Settings(app_env="test", max_body_bytes=64))

        with TestClient(app) as small_client:
            response = small_client.post(
                "/api/v1/users",
                content=b"x" * 65,
                headers={"Content-Type": "application/json"},
            )

        assert response.status_code == 413
        assert response.json()["code"] == "PAYLOAD_TOO_LARGE"

    def test_chunked_payload_too_large(self, in_memory_repo):
        app = create_app(Settings(app_env="test", max_body_bytes=64))

        with TestClient(app) as small_client:
            response = small_client.post(
                "/api/v1/users",
                content=(chunk for chunk in [b"x" * 40, b"x" * 40]),
                headers={"Content-Type": "application/json"},
            )

        assert response.status_code == 413
        body = response.json()
        assert body["code"] == "PAYLOAD_TOO_LARGE"
        assert body["message"] == "Request body too large. Maximum allowed: 64 bytes"


class TestServerErrors:
    def test_unexpected_exception_is_generic_500(self, in_memory_repo):
        app = create_app()
        use_case = MagicMock()
        use_case.execute.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_get_user_use_case] = lambda: use_case

        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/api/v1/users/anything")

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert body["message"] == "An unexpected error occurred"

    def test_storage_failure_hides_details(self, in_memory_repo):
        app = create_app()
        use_case = MagicMock()
        use_case.execute.side_effect = DatabaseError("connection reset by peer")
        app.dependency_overrides[get_get_user_use_case] = lambda: use_case

        with TestClient(app) as test_client:
            response = test_client.get("/api/v1/users/anything")

        assert response.status_code == 500
        assert "connection reset" not in response.text
        assert "error_id" in response.json()["details"][0]


class TestRequestId:
    def test_generated_when_missing(self, client):
        response = client.get("/api/v1/users")
        assert response.headers["X-Request-Id"]

    def test_echoed_when_sent(self, client):
        response = client.get("/api/v1/users", headers={"X-Request-Id": "abc-123"})
        assert response.headers["X-Request-Id"] == "abc-123"

    def test_included_in_error_details(self, client):
        response = client.get("/api/v1/users/nope", headers={"X-Request-Id": "req-9"})
        assert {"request_id": "req-9"} in response.json()["details"]


class TestOpsEndpoints:
    def test_healthz(self, client):
        body = client.get("/healthz").json()
        assert body["ok"] is True
        assert body["db"] == "connected"

    def test_readyz_unavailable(self, client, monkeypatch):
        monkeypatch.setattr(get_user_repository(), "ping", lambda: False)

        response = client.get("/readyz")

        assert response.status_code == 503
        body = response.json()
        assert body["code"] == "SERVICE_UNAVAILABLE"
        assert body["status"] == 503
        assert {"db": "disconnected"} in body["details"]

    def test_metrics(self, client):
        client.get("/api/v1/users")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "user_directory_requests_total" in response.text

    def test_metrics_label_unknown_paths_as_unmatched(self, client):
        client.get("/nowhere/abc-123")

        text = client.get("/metrics").text

        assert 'endpoint="unmatched"' in text
        assert "/nowhere/abc-123" not in text

    def test_metrics_label_user_routes_by_template(self, client, payload_factory):
        user_id = client.post("/api/v1/users", json=payload_factory()).json()["data"]["id"]
        client.get(f"/api/v1/users/{user_id}")

        text = client.get("/metrics").text

        assert 'endpoint="/api/v1/users/{user_id}"' in text
        assert user_id not in text
