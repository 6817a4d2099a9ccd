"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Decide which storage adapter the container wires (in-memory vs Postgres)

Collaborators:
  - api/main.py: reads settings for CORS, pool bounds and startup tasks
  - container.py: reads app_env to pick the user repository
  - application/usecases/users/list_users.py: page size limits

Constraints:
  - Lives in the crosscutting layer, NOT in domain/application logic
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IN_MEMORY_ENVS = {"test", "testing", "ci"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/production/test)
        database_url: PostgreSQL connection string (required outside test envs)
        db_pool_min_size: Minimum pooled connections (default: 1)
        db_pool_max_size: Maximum pooled connections (default: 10)
        db_statement_timeout_ms: statement_timeout per connection (default: 30s)
        db_ensure_schema: Create the users table at startup (default: False)
        allowed_origins: Comma-separated CORS origins
        cors_allow_credentials: Allow cookies cross-origin (default: False)
        default_page_size: Page size when `limit` is omitted (default: 10)
        max_page_size: Largest accepted `limit` (default: 100)
        max_body_bytes: Max request body size (default: 1MB)
        log_level: Root level for the application logger
        log_json: Emit JSON log lines (default: True)
        dev_seed_users: Seed the demo users at startup (default: False)
    """

    # Environment
    app_env: str = "development"

    # Database
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000
    db_ensure_schema: bool = False

    # CORS configuration (Vite dev server + CRA default)
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"
    cors_allow_credentials: bool = False

    # Listing
    default_page_size: int = 10
    max_page_size: int = 100

    # Hardening
    max_body_bytes: int = 1024 * 1024

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Dev tools
    dev_seed_users: bool = False

    @field_validator("db_pool_min_size")
    @classmethod
    def pool_min_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("db_pool_min_size must be >= 0")
        return v

    @field_validator("db_pool_max_size", "default_page_size", "max_page_size")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_pool_bounds(self):
        if self.db_pool_max_size < self.db_pool_min_size:
            raise ValueError(
                f"db_pool_max_size ({self.db_pool_max_size}) must be >= "
                f"db_pool_min_size ({self.db_pool_min_size})"
            )
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) must be <= "
                f"max_page_size ({self.max_page_size})"
            )
        return self

    @model_validator(mode="after")
    def validate_database_requirements(self):
        if self.uses_in_memory_storage():
            return self
        if not self.database_url.strip():
            raise ValueError("DATABASE_URL is required unless APP_ENV is test/ci")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def uses_in_memory_storage(self) -> bool:
        return self.app_env.strip().lower() in _IN_MEMORY_ENVS

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
