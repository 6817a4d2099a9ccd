"""
Name sanitizer.

Second line of defense after validation: name fields are reduced to letters,
spaces, hyphens and apostrophes before hashing and persistence.
"""

from __future__ import annotations

from typing import Any

_ALLOWED_PUNCTUATION = frozenset(" -'")


def is_name_char(ch: str) -> bool:
    return ch.isalpha() or ch in _ALLOWED_PUNCTUATION


def sanitize_name(value: Any) -> Any:
    """
    Strip every character outside letters/space/hyphen/apostrophe, then trim.

    Falsy input (None, "") is returned unchanged; any other non-string
    becomes "".
    """
    if not value:
        return value
    if not isinstance(value, str):
        return ""
    return "".join(ch for ch in value if is_name_char(ch)).strip()
