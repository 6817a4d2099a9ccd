"""
===============================================================================
USE CASE: List Users
===============================================================================

Business Goal:
    Search, sort and paginate the directory.

Flow:
    parse/validate query parameters (no storage call on failure)
    -> repository.list_users(criteria) -> page + total

Error Mapping:
    - BAD_REQUEST: unknown column, bad sort direction, non-integer or
      out-of-range page/limit, searchKey without searchValue (or vice versa)
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import UserRepository
from ...list_params import InvalidListParamsError, RawListParams, parse_list_params
from .user_results import UserError, UserErrorCode, UserPageResult


class ListUsersUseCase:
    def __init__(
        self,
        repository: UserRepository,
        *,
        default_limit: int = 10,
        max_limit: int = 100,
    ) -> None:
        self._users = repository
        self._default_limit = default_limit
        self._max_limit = max_limit

    def execute(self, params: RawListParams) -> UserPageResult:
        try:
            criteria = parse_list_params(
                params,
                default_limit=self._default_limit,
                max_limit=self._max_limit,
            )
        except InvalidListParamsError as exc:
            return UserPageResult(
                error=UserError(
                    code=UserErrorCode.BAD_REQUEST,
                    message=exc.message,
                    details=exc.details,
                )
            )

        page = self._users.list_users(criteria)
        return UserPageResult(
            users=list(page.items),
            total=page.total,
            page=criteria.page,
            limit=criteria.limit,
        )
