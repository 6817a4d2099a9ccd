"""User use cases."""

from .create_user import CreateUserUseCase
from .delete_user import DeleteUserUseCase
from .get_user import GetUserUseCase
from .list_users import ListUsersUseCase
from .update_user import UpdateUserUseCase
from .user_results import (
    DeleteUserResult,
    UserError,
    UserErrorCode,
    UserPageResult,
    UserResult,
)

__all__ = [
    "CreateUserUseCase",
    "DeleteUserUseCase",
    "GetUserUseCase",
    "ListUsersUseCase",
    "UpdateUserUseCase",
    "DeleteUserResult",
    "UserError",
    "UserErrorCode",
    "UserPageResult",
    "UserResult",
]
