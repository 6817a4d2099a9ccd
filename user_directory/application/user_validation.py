"""
===============================================================================
MODULE: User payload validation
===============================================================================

Responsibilities:
  - Schema-check a raw create/update payload.
  - Normalize it (trimmed strings, enums verified, status defaulted).
  - Collect EVERY violation, not just the first one.

Collaborators:
  - pydantic (schema)
  - email_validator (address syntax; the submitted string is kept as-is)
  - application/sanitizer.py (name character class)
  - application/usecases/users (create/update)

Output contract:
  - Success: UserProfile
  - Failure: UserValidationError(message=<first violation>, violations=[...])
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from ..domain.entities import UserGender, UserProfile, UserStatus
from .sanitizer import is_name_char

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 30
NAME_FIELDS = ("first_name", "last_name")
NAME_CHARSET_MESSAGE = "may only contain letters, spaces, hyphens and apostrophes"


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class UserValidationError(Exception):
    """Raised when a payload violates one or more field constraints."""

    def __init__(self, message: str, violations: List[FieldViolation] | None = None):
        self.message = message
        self.violations = list(violations or [])
        super().__init__(message)


class _UserPayload(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    first_name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: str
    gender: UserGender
    status: UserStatus = UserStatus.ACTIVE

    @field_validator(*NAME_FIELDS)
    @classmethod
    def names_use_allowed_characters(cls, v: str) -> str:
        if not all(is_name_char(ch) for ch in v):
            raise PydanticCustomError("name_charset", NAME_CHARSET_MESSAGE)
        return v

    @field_validator("email")
    @classmethod
    def email_is_well_formed(cls, v: str) -> str:
        # Display-name forms ("Ada <ada@example.com>") are rejected.
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("email_format", "must be a valid email") from None
        return v

    @field_validator("gender", "status", mode="before")
    @classmethod
    def strip_enum_values(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


def _allowed(enum_cls) -> str:
    return ", ".join(member.value for member in enum_cls)


_ENUM_FIELDS = {"gender": UserGender, "status": UserStatus}


def _message_for(name: str, error: Mapping[str, Any]) -> str:
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f'"{name}" is required'
    if kind == "extra_forbidden":
        return f'"{name}" is not allowed'
    if kind == "string_type":
        return f'"{name}" must be a string'
    if kind == "string_too_short":
        return f'"{name}" length must be at least {ctx.get("min_length")} characters long'
    if kind == "string_too_long":
        return f'"{name}" length must be at most {ctx.get("max_length")} characters long'
    if kind == "name_charset":
        return f'"{name}" {error.get("msg")}'
    if name in _ENUM_FIELDS:
        return f'"{name}" must be one of [{_allowed(_ENUM_FIELDS[name])}]'
    if name == "email":
        return '"email" must be a valid email'
    return f'"{name}" {error.get("msg", "is invalid")}'


def _violations_from(exc: ValidationError) -> List[FieldViolation]:
    violations: List[FieldViolation] = []
    for error in exc.errors():
        loc = error.get("loc") or ("value",)
        name = ".".join(str(part) for part in loc)
        violations.append(FieldViolation(field=name, message=_message_for(name, error)))
    return violations


def _has_name_charset_error(name: str, violations: List[FieldViolation]) -> bool:
    return any(
        v.field == name and v.message.endswith(NAME_CHARSET_MESSAGE) for v in violations
    )


def _charset_violations(
    payload: Mapping[str, Any], violations: List[FieldViolation]
) -> List[FieldViolation]:
    """
    Charset problems on names that already failed another check.

    pydantic stops at the first failing constraint of a field, so a name
    that is too short is never charset-checked by the model.
    """
    extra: List[FieldViolation] = []
    for name in NAME_FIELDS:
        raw = payload.get(name)
        if not isinstance(raw, str) or _has_name_charset_error(name, violations):
            continue
        if all(is_name_char(ch) for ch in raw.strip()):
            continue
        extra.append(
            FieldViolation(field=name, message=f'"{name}" {NAME_CHARSET_MESSAGE}')
        )
    return extra


def validate_user_payload(payload: Any) -> UserProfile:
    """
    Validate and normalize a raw payload.

    Raises:
        UserValidationError: with the first violation as message and the
        full list in `violations`.
    """
    if not isinstance(payload, Mapping):
        violation = FieldViolation(field="value", message='"value" must be an object')
        raise UserValidationError(violation.message, [violation])

    try:
        parsed = _UserPayload.model_validate(dict(payload))
    except ValidationError as exc:
        violations = _violations_from(exc)
        violations += _charset_violations(payload, violations)
        raise UserValidationError(violations[0].message, violations) from exc

    return UserProfile(
        first_name=parsed.first_name,
        last_name=parsed.last_name,
        email=parsed.email,
        gender=parsed.gender,
        status=parsed.status,
    )
