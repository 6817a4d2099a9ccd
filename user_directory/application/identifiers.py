"""Parsing of user ids taken from the URL path."""

from __future__ import annotations

import re
from typing import Optional
from uuid import UUID

_UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def parse_user_id(raw: object) -> Optional[UUID]:
    """Return the UUID for a canonical textual id, None for anything else."""
    if isinstance(raw, UUID):
        return raw
    if not isinstance(raw, str) or not _UUID_PATTERN.match(raw):
        return None
    return UUID(raw)
