"""
===============================================================================
CRC CARD — domain/entities.py
===============================================================================

Module:
    Domain entities (User, UserProfile) and their enums

Responsibilities:
    - Define the core business structures (no infrastructure).
    - Keep the fingerprinted "business fields" in one place.

Collaborators:
    - domain.repositories: persist/fetch these entities.
    - application/usecases/users: build/consume these entities.
    - interfaces/api/http/schemas/users.py: serialize them to DTOs.

Principles:
    - No dependencies on DB/FastAPI.
    - Data plus minimal behavior.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserGender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    NON_BINARY = "Non-Binary"


class UserStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


# ---------------------------------------------------------------------------
# UserProfile (validated payload)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UserProfile:
    """
    Validated, sanitized user data as submitted by a client.

    The fingerprint is computed over business_fields(); status is not part
    of it, so two records differing only in status are duplicates.
    """

    first_name: str
    last_name: str
    email: str
    gender: UserGender
    status: UserStatus = UserStatus.ACTIVE

    def business_fields(self) -> dict[str, str]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "gender": self.gender.value,
        }


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


@dataclass
class User:
    """A stored user record."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    gender: UserGender
    status: UserStatus
    fingerprint: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_profile(cls, user_id: UUID, profile: UserProfile, fingerprint: str) -> User:
        return cls(
            id=user_id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            email=profile.email,
            gender=profile.gender,
            status=profile.status,
            fingerprint=fingerprint,
        )

    def with_profile(self, profile: UserProfile, fingerprint: str) -> User:
        """Copy with every mutable field overwritten; id and created_at are kept."""
        return replace(
            self,
            first_name=profile.first_name,
            last_name=profile.last_name,
            email=profile.email,
            gender=profile.gender,
            status=profile.status,
            fingerprint=fingerprint,
            updated_at=_utcnow(),
        )
