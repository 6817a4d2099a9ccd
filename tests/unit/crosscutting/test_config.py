"""Unit tests for Settings validation."""

import pytest
from pydantic import ValidationError

from user_directory.crosscutting.config import Settings

pytestmark = pytest.mark.unit


def test_test_env_needs_no_database_url():
    settings = Settings(app_env="test", database_url="")
    assert settings.uses_in_memory_storage()
    assert not settings.is_production()


def test_database_url_required_outside_test_envs():
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        Settings(app_env="production", database_url="  ")


def test_production_flag():
    settings = Settings(app_env="Production", database_url="postgresql://db/users")
    assert settings.is_production()
    assert not settings.uses_in_memory_storage()


def test_pool_bounds():
    with pytest.raises(ValidationError, match="db_pool_max_size"):
        Settings(app_env="test", db_pool_min_size=5, db_pool_max_size=2)


def test_default_page_size_within_max():
    with pytest.raises(ValidationError, match="default_page_size"):
        Settings(app_env="test", default_page_size=50, max_page_size=20)


def test_allowed_origins_list():
    settings = Settings(app_env="test", allowed_origins=" http://a.example , ,http://b.example")
    assert settings.get_allowed_origins_list() == ["http://a.example", "http://b.example"]


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("MAX_PAGE_SIZE", "250")
    monkeypatch.setenv("DEV_SEED_USERS", "true")

    settings = Settings(app_env="test")

    assert settings.max_page_size == 250
    assert settings.dev_seed_users is True
