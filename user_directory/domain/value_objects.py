"""
===============================================================================
DOMAIN: Value Objects (immutable listing primitives)
===============================================================================

Contents:
    - UserField: closed allow-list of searchable/sortable columns
    - SortOrder: ASC/DESC
    - UserListCriteria: parsed search/sort/page request
    - UserPage: one page of users plus the total match count

Principles:
    - Immutability (frozen dataclasses)
    - Validation in the constructor
    - No side effects
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, List, Optional

from .entities import User

SEARCH_ALL: Final[str] = "all"


class UserField(str, Enum):
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"
    GENDER = "gender"
    STATUS = "status"

    @property
    def is_exact_match(self) -> bool:
        """Enum-valued columns are matched by equality instead of containment."""
        return self in (UserField.GENDER, UserField.STATUS)


TEXT_FIELDS: Final[tuple[UserField, ...]] = (
    UserField.FIRST_NAME,
    UserField.LAST_NAME,
    UserField.EMAIL,
)
EXACT_FIELDS: Final[tuple[UserField, ...]] = (UserField.GENDER, UserField.STATUS)


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True, slots=True)
class UserListCriteria:
    """
    Search/sort/page request for the user listing.

    search_term None means "no filter". search_field None with a term means a
    global search across every column.
    """

    search_term: Optional[str] = None
    search_field: Optional[UserField] = None
    sort_field: UserField = UserField.FIRST_NAME
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def is_global_search(self) -> bool:
        return self.search_term is not None and self.search_field is None


@dataclass(frozen=True, slots=True)
class UserPage:
    items: List[User] = field(default_factory=list)
    total: int = 0
