"""
===============================================================================
CRC CARD — schemas/users.py
===============================================================================

Module:
    HTTP response schemas for users

Responsibilities:
    - Define response DTOs and envelopes ({data}, {message, data}, {data, meta}).
    - Keep the JSON contract stable (camelCase paging meta).

Notes:
    - Request bodies are NOT modeled here: raw payloads go to the Validator
      so every violation is reported in the shared error shape.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .....domain.entities import User, UserGender, UserStatus


class UserRes(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    gender: UserGender
    status: UserStatus
    fingerprint: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, user: User) -> UserRes:
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            gender=user.gender,
            status=user.status,
            fingerprint=user.fingerprint,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserEnvelope(BaseModel):
    data: UserRes


class UserMessageEnvelope(BaseModel):
    message: str
    data: UserRes


class PageMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_records: int = Field(alias="totalRecords")
    total_pages: int = Field(alias="totalPages")
    current_page: int = Field(alias="currentPage")
    limit: int


class UserListEnvelope(BaseModel):
    data: List[UserRes]
    meta: PageMeta


class DeletedUserRes(BaseModel):
    id: UUID
    status: Literal["Deleted"] = "Deleted"


class DeleteUserEnvelope(BaseModel):
    message: str
    data: DeletedUserRes
