"""
============================================================
CRC CARD — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Store users in memory (tests / local dev without PostgreSQL).
  - Enforce fingerprint uniqueness like the `users_fingerprint_key`
    constraint does (DuplicateFingerprintError).
  - Mirror the listing semantics of the SQL query builder: same filters,
    case-insensitive ordering, id as tie-breaker.

Collaborators:
  - domain.entities.User
  - domain.repositories.UserRepository (contract)

Constraints / Notes:
  - Thread-safe: every read/write happens under a Lock.
  - Defensive copies: callers never share stored instances.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Dict, List, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateFingerprintError
from ....domain.entities import User
from ....domain.repositories import UserRepository
from ....domain.value_objects import (
    EXACT_FIELDS,
    TEXT_FIELDS,
    SortOrder,
    UserField,
    UserListCriteria,
    UserPage,
)


def _field_value(user: User, field: UserField) -> str:
    value = getattr(user, field.value)
    return value.value if hasattr(value, "value") else str(value)


def _contains(user: User, field: UserField, term: str) -> bool:
    return term.lower() in _field_value(user, field).lower()


def _equals(user: User, field: UserField, term: str) -> bool:
    return _field_value(user, field).lower() == term.lower()


def _matcher(criteria: UserListCriteria) -> Callable[[User], bool]:
    term = criteria.search_term
    if term is None:
        return lambda _user: True

    if criteria.search_field is None:
        return lambda user: any(_contains(user, f, term) for f in TEXT_FIELDS) or any(
            _equals(user, f, term) for f in EXACT_FIELDS
        )

    field = criteria.search_field
    if field.is_exact_match:
        return lambda user: _equals(user, field, term)
    return lambda user: _contains(user, field, term)


class InMemoryUserRepository(UserRepository):
    """
    In-memory, thread-safe user repository.

    Mental model:
    - _users is the "table" (UUID -> User).
    - _by_fingerprint is the unique index (fingerprint -> UUID).
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}
        self._by_fingerprint: Dict[str, UUID] = {}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def create_user(self, user: User) -> User:
        with self._lock:
            if user.fingerprint in self._by_fingerprint:
                raise DuplicateFingerprintError(user.fingerprint)
            now = self._now()
            stored = replace(user, created_at=now, updated_at=now)
            self._users[stored.id] = stored
            self._by_fingerprint[stored.fingerprint] = stored.id
            return replace(stored)

    def get_user(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def get_user_by_fingerprint(self, fingerprint: str) -> Optional[User]:
        with self._lock:
            user_id = self._by_fingerprint.get(fingerprint)
            return replace(self._users[user_id]) if user_id else None

    def update_user(self, user: User) -> Optional[User]:
        with self._lock:
            current = self._users.get(user.id)
            if current is None:
                return None
            holder = self._by_fingerprint.get(user.fingerprint)
            if holder is not None and holder != user.id:
                raise DuplicateFingerprintError(user.fingerprint)

            stored = replace(user, created_at=current.created_at, updated_at=self._now())
            self._by_fingerprint.pop(current.fingerprint, None)
            self._by_fingerprint[stored.fingerprint] = stored.id
            self._users[stored.id] = stored
            return replace(stored)

    def delete_user(self, user_id: UUID) -> bool:
        with self._lock:
            user = self._users.pop(user_id, None)
            if user is None:
                return False
            self._by_fingerprint.pop(user.fingerprint, None)
            return True

    def list_users(self, criteria: UserListCriteria) -> UserPage:
        with self._lock:
            values = list(self._users.values())

        match = _matcher(criteria)
        matches = [u for u in values if match(u)]

        # Two stable passes: id ascending first, then the sort column.
        matches.sort(key=lambda u: str(u.id))
        matches.sort(
            key=lambda u: _field_value(u, criteria.sort_field).lower(),
            reverse=criteria.sort_order == SortOrder.DESC,
        )

        window = matches[criteria.offset : criteria.offset + criteria.limit]
        return UserPage(items=[replace(u) for u in window], total=len(matches))

    def ping(self) -> bool:
        return True

    def clear(self) -> None:
        with self._lock:
            self._users.clear()
            self._by_fingerprint.clear()
