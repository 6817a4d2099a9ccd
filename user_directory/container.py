"""
===============================================================================
CRC CARD — user_directory/container.py (Composition Root / manual DI)
===============================================================================

Responsibilities:
  - Compose repositories and use cases following DIP.
  - Expose factories for FastAPI (Depends).
  - Keep singletons cached with lru_cache.
  - Centralize runtime decisions based on Settings.

Collaborators:
  - crosscutting.config.get_settings
  - domain.repositories.UserRepository (port)
  - infrastructure.repositories (implementations)
  - application.usecases.users (use cases)

Notes:
  - No business logic here.
  - Does not depend on FastAPI (factories only).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases.users import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import UserRepository
from .infrastructure.repositories import InMemoryUserRepository, PostgresUserRepository


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """User repository (in-memory in test/ci; Postgres otherwise)."""
    if get_settings().uses_in_memory_storage():
        return InMemoryUserRepository()
    return PostgresUserRepository()


def get_create_user_use_case() -> CreateUserUseCase:
    return CreateUserUseCase(get_user_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    settings = get_settings()
    return ListUsersUseCase(
        get_user_repository(),
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )


def get_get_user_use_case() -> GetUserUseCase:
    return GetUserUseCase(get_user_repository())


def get_update_user_use_case() -> UpdateUserUseCase:
    return UpdateUserUseCase(get_user_repository())


def get_delete_user_use_case() -> DeleteUserUseCase:
    return DeleteUserUseCase(get_user_repository())
