"""
===============================================================================
MODULE: Fingerprint (deterministic content hash for duplicate detection)
===============================================================================

Responsibilities:
  - Serialize a record's business fields deterministically.
  - Compute the SHA-256 fingerprint stored in users.fingerprint.

Collaborators:
  - application/usecases/users: create/update compute the fingerprint
  - domain/entities.UserProfile: provides business_fields()

Design decisions:
  - Pure functions (no IO, no side effects).
  - Keys sorted, compact separators, non-ASCII kept verbatim.
  - Lowercase + trim over the serialized text: the same values in any key
    order and any letter case produce the same fingerprint.
  - status is not a business field.
===============================================================================
"""

from __future__ import annotations

import hashlib
import json
from typing import Mapping

from ..domain.entities import UserProfile


def normalize_fields(fields: Mapping[str, object]) -> str:
    """Canonical text form of `fields` used as hash input."""
    serialized = json.dumps(
        dict(fields),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return serialized.lower().strip()


def compute_fingerprint(fields: Mapping[str, object]) -> str:
    """
    SHA-256 over the normalized serialization of `fields`.

    Returns: 64-character hex digest.
    """
    return hashlib.sha256(normalize_fields(fields).encode("utf-8")).hexdigest()


def user_fingerprint(profile: UserProfile) -> str:
    return compute_fingerprint(profile.business_fields())
