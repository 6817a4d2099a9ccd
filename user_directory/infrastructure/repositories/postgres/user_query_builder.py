"""
============================================================
CRC CARD — infrastructure/repositories/postgres/user_query_builder.py
============================================================
Component: build_list_queries

Responsibilities:
  - Translate a UserListCriteria into a data statement and a count
    statement that share the same WHERE clause and parameters.
  - Keep SQL identifiers on a closed allow-list: column names and sort
    direction come only from enum -> fixed fragment lookups.
  - Bind every user-supplied value as a parameter; LIKE wildcards in the
    term are escaped so they match literally.

Collaborators:
  - domain.value_objects: UserField, SortOrder, UserListCriteria
  - postgres/user.py: executes the statements

Notes:
  - Global search: text columns ILIKE %term%, gender/status equal to the
    term ignoring case.
  - ORDER BY is case-insensitive; id breaks ties for stable paging.
============================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ....domain.value_objects import (
    EXACT_FIELDS,
    TEXT_FIELDS,
    SortOrder,
    UserField,
    UserListCriteria,
)

USER_COLUMNS = (
    "id, first_name, last_name, email, gender, status, fingerprint, "
    "created_at, updated_at"
)

_COLUMN_SQL: dict[UserField, str] = {
    UserField.FIRST_NAME: "first_name",
    UserField.LAST_NAME: "last_name",
    UserField.EMAIL: "email",
    UserField.GENDER: "gender",
    UserField.STATUS: "status",
}

_DIRECTION_SQL: dict[SortOrder, str] = {
    SortOrder.ASC: "ASC",
    SortOrder.DESC: "DESC",
}


@dataclass(frozen=True)
class SqlStatement:
    sql: str
    params: Tuple[object, ...]


@dataclass(frozen=True)
class UserListQueries:
    select: SqlStatement
    count: SqlStatement


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters (backslash is the default ESCAPE)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column: str) -> str:
    return f"{column} ILIKE %s"


def _equals_ignore_case(column: str) -> str:
    return f"LOWER({column}) = LOWER(%s)"


def build_where(criteria: UserListCriteria) -> Tuple[str, List[object]]:
    """WHERE clause (possibly empty) and its parameters."""
    term = criteria.search_term
    if term is None:
        return "", []

    pattern = f"%{escape_like(term)}%"

    if criteria.search_field is None:
        clauses = [_contains(_COLUMN_SQL[f]) for f in TEXT_FIELDS]
        clauses += [_equals_ignore_case(_COLUMN_SQL[f]) for f in EXACT_FIELDS]
        params: List[object] = [pattern] * len(TEXT_FIELDS) + [term] * len(EXACT_FIELDS)
        return "WHERE (" + " OR ".join(clauses) + ")", params

    column = _COLUMN_SQL[criteria.search_field]
    if criteria.search_field.is_exact_match:
        return f"WHERE {_equals_ignore_case(column)}", [term]
    return f"WHERE {_contains(column)}", [pattern]


def build_order_by(criteria: UserListCriteria) -> str:
    column = _COLUMN_SQL[criteria.sort_field]
    direction = _DIRECTION_SQL[criteria.sort_order]
    return f"ORDER BY LOWER({column}) {direction}, id ASC"


def build_list_queries(criteria: UserListCriteria) -> UserListQueries:
    where, params = build_where(criteria)
    order_by = build_order_by(criteria)

    select_sql = " ".join(
        part
        for part in (
            f"SELECT {USER_COLUMNS} FROM users",
            where,
            order_by,
            "LIMIT %s OFFSET %s",
        )
        if part
    )
    count_sql = " ".join(part for part in ("SELECT COUNT(*) FROM users", where) if part)

    return UserListQueries(
        select=SqlStatement(select_sql, tuple(params) + (criteria.limit, criteria.offset)),
        count=SqlStatement(count_sql, tuple(params)),
    )
