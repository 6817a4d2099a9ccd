"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (APP_ENV=test, no .env file)
  - Provide user payload/entity factories
  - Provide a fresh in-memory repository and an HTTP client per test

Notes:
  - APP_ENV must be set BEFORE user_directory is imported: the app module
    builds the FastAPI instance at import time.
"""

import os
import sys
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ["APP_ENV"] = "test"
os.environ.setdefault("DEV_SEED_USERS", "false")
os.environ.setdefault("LOG_JSON", "true")

from user_directory.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None
app_config.get_settings.cache_clear()

from user_directory.application.fingerprint import user_fingerprint  # noqa: E402
from user_directory.container import get_user_repository  # noqa: E402
from user_directory.domain.entities import (  # noqa: E402
    User,
    UserGender,
    UserProfile,
    UserStatus,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that need a running PostgreSQL"
    )


# ============================================================================
# Factories
# ============================================================================


def make_payload(**overrides) -> dict:
    payload = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada.lovelace@example.com",
        "gender": "Female",
        "status": "Active",
    }
    payload.update(overrides)
    return payload


def make_user(**overrides) -> User:
    profile = UserProfile(
        first_name=overrides.pop("first_name", "Ada"),
        last_name=overrides.pop("last_name", "Lovelace"),
        email=overrides.pop("email", "ada.lovelace@example.com"),
        gender=UserGender(overrides.pop("gender", "Female")),
        status=UserStatus(overrides.pop("status", "Active")),
    )
    user = User.from_profile(
        overrides.pop("id", uuid4()), profile, user_fingerprint(profile)
    )
    for key, value in overrides.items():
        setattr(user, key, value)
    return user


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def user_factory():
    return make_user


# ============================================================================
# Repository / app fixtures
# ============================================================================


@pytest.fixture
def in_memory_repo():
    """R: Fresh in-memory repository shared with the container for this test."""
    get_user_repository.cache_clear()
    repo = get_user_repository()
    yield repo
    get_user_repository.cache_clear()


@pytest.fixture
def client(in_memory_repo):
    """R: TestClient over a freshly built app (lifespan included)."""
    from fastapi.testclient import TestClient

    from user_directory.api.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
