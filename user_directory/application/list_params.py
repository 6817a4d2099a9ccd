"""
===============================================================================
MODULE: Listing parameters (search / sort / pagination)
===============================================================================

Responsibilities:
  - Turn raw query-string values into a UserListCriteria.
  - Reject unknown columns, bad sort directions and non-integer paging
    BEFORE any storage call.

Accepted parameters:
  - search:       global term (matches every column)
  - searchKey:    column name from the allow-list, or "all"
  - searchValue:  term for searchKey (both or neither)
  - sortField:    column name from the allow-list (default first_name)
  - sortOrder:    ASC | DESC, case-insensitive (default ASC)
  - page, limit:  positive integers; limit capped by max_limit

Collaborators:
  - domain/value_objects.py (UserField, SortOrder, UserListCriteria)
  - application/usecases/users/list_users.py
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Optional

from ..domain.value_objects import SEARCH_ALL, SortOrder, UserField, UserListCriteria

DEFAULT_PAGE = 1
# OFFSET is bound as a PostgreSQL bigint.
MAX_OFFSET = 2**63 - 1

_DIGITS = re.compile(r"[0-9]+\Z")


class InvalidListParamsError(ValueError):
    """A listing parameter is malformed; `details` names the allowed values."""

    def __init__(self, message: str, details: List[Any] | None = None):
        self.message = message
        self.details = list(details or [])
        super().__init__(message)


@dataclass(frozen=True)
class RawListParams:
    search: Optional[str] = None
    search_key: Optional[str] = None
    search_value: Optional[str] = None
    sort_field: Optional[str] = None
    sort_order: Optional[str] = None
    page: Optional[str] = None
    limit: Optional[str] = None


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _allowed_fields() -> List[str]:
    return [f.value for f in UserField]


def _parse_field(raw: str, param: str, *, allow_all: bool) -> Optional[UserField]:
    key = raw.lower()
    if allow_all and key == SEARCH_ALL:
        return None
    try:
        return UserField(key)
    except ValueError:
        allowed = _allowed_fields() + ([SEARCH_ALL] if allow_all else [])
        raise InvalidListParamsError(
            f"Invalid {param} '{raw}'. Allowed values: {', '.join(allowed)}",
            [{"param": param, "allowed": allowed}],
        ) from None


def _parse_order(raw: Optional[str]) -> SortOrder:
    if raw is None:
        return SortOrder.ASC
    try:
        return SortOrder(raw.upper())
    except ValueError:
        allowed = [o.value for o in SortOrder]
        raise InvalidListParamsError(
            f"Invalid sortOrder '{raw}'. Allowed values: {', '.join(allowed)}",
            [{"param": "sortOrder", "allowed": allowed}],
        ) from None


def _parse_positive_int(raw: Optional[str], param: str, default: int) -> int:
    if raw is None:
        return default
    # ASCII digits only: int() also takes "1_0" and non-ASCII digits.
    if not _DIGITS.match(raw):
        raise InvalidListParamsError(
            f"{param} must be a positive integer",
            [{"param": param, "value": raw}],
        )
    try:
        value = int(raw)
    except ValueError:
        # Longer than the interpreter's int string-conversion limit.
        raise InvalidListParamsError(
            f"{param} is out of range",
            [{"param": param}],
        ) from None
    if value < 1:
        raise InvalidListParamsError(
            f"{param} must be a positive integer",
            [{"param": param, "value": raw}],
        )
    return value


def parse_list_params(
    raw: RawListParams,
    *,
    default_limit: int = 10,
    max_limit: int = 100,
) -> UserListCriteria:
    """
    Validate raw listing parameters.

    searchKey/searchValue take precedence over `search` when both are sent.

    Raises:
        InvalidListParamsError: on any malformed parameter.
    """
    search = _clean(raw.search)
    search_key = _clean(raw.search_key)
    search_value = _clean(raw.search_value)

    if (search_key is None) != (search_value is None):
        raise InvalidListParamsError(
            "searchKey and searchValue must be provided together",
            [{"param": "searchKey" if search_key is None else "searchValue"}],
        )

    search_field: Optional[UserField] = None
    search_term: Optional[str] = search
    if search_key is not None:
        search_field = _parse_field(search_key, "searchKey", allow_all=True)
        search_term = search_value

    sort_raw = _clean(raw.sort_field)
    sort_field = (
        _parse_field(sort_raw, "sortField", allow_all=False)
        if sort_raw is not None
        else UserField.FIRST_NAME
    )
    sort_order = _parse_order(_clean(raw.sort_order))

    page = _parse_positive_int(_clean(raw.page), "page", DEFAULT_PAGE)
    limit = _parse_positive_int(_clean(raw.limit), "limit", default_limit)
    if limit > max_limit:
        raise InvalidListParamsError(
            f"limit must be between 1 and {max_limit}",
            [{"param": "limit", "max": max_limit}],
        )
    if (page - 1) * limit > MAX_OFFSET:
        raise InvalidListParamsError(
            "page is out of range",
            [{"param": "page", "value": raw.page}],
        )

    return UserListCriteria(
        search_term=search_term,
        search_field=search_field,
        sort_field=sort_field,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
