"""
CRC — domain/repositories.py

Name
- Domain Repository Interface (Protocol)

Responsibilities
- Define the persistence contract for users (port).
- Keep the application layer independent from PostgreSQL / in-memory storage.

Collaborators
- domain.entities: User
- domain.value_objects: UserListCriteria, UserPage
- infrastructure.repositories: postgres and in_memory implementations

Constraints
- Pure interface: no side effects, no infrastructure imports, no SQL.
- Implementations MUST match method signatures exactly.
"""

from typing import Optional, Protocol
from uuid import UUID

from .entities import User
from .value_objects import UserListCriteria, UserPage


class UserRepository(Protocol):
    """
    R: Interface for user persistence.

    Implementations must enforce fingerprint uniqueness and raise
    DuplicateFingerprintError when a write would break it.
    """

    def create_user(self, user: User) -> User:
        """R: Insert a user and return it as stored (timestamps filled)."""
        ...

    def get_user(self, user_id: UUID) -> Optional[User]:
        """R: Fetch a user by ID."""
        ...

    def get_user_by_fingerprint(self, fingerprint: str) -> Optional[User]:
        """R: Fetch the user holding a fingerprint, if any."""
        ...

    def update_user(self, user: User) -> Optional[User]:
        """
        R: Overwrite every mutable field of an existing user.

        Returns None when the id no longer exists.
        """
        ...

    def delete_user(self, user_id: UUID) -> bool:
        """R: Remove a user. Returns False when nothing was deleted."""
        ...

    def list_users(self, criteria: UserListCriteria) -> UserPage:
        """
        R: Filter, sort and paginate users.

        Implementations MUST:
            - Return the total match count (ignoring limit/offset)
            - Break sort ties by id so pages are stable
        """
        ...

    def ping(self) -> bool:
        """R: True when the backing store is reachable."""
        ...
