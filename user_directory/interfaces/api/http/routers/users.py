"""
===============================================================================
CRC CARD — interfaces/api/http/routers/users.py
===============================================================================

Module:
    Users Router

Responsibilities:
    - Expose the /users CRUD endpoints.
    - Convert HTTP requests into use-case inputs (raw body, query strings).
    - Translate UserError into the shared error body.
    - Shape success envelopes ({data}, {message, data}, {data, meta}).

Collaborators:
    - application.usecases.users (Create/List/Get/Update/Delete)
    - container (DI factories)
    - schemas.users (response DTOs)
    - error_mapping.raise_user_error

Patterns:
    - Controller / Router
    - Adapter (HTTP -> UseCase)
===============================================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from .....application.list_params import RawListParams
from .....application.usecases.users import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from .....container import (
    get_create_user_use_case,
    get_delete_user_use_case,
    get_get_user_use_case,
    get_list_users_use_case,
    get_update_user_use_case,
)
from .....crosscutting.error_responses import internal_error
from ..error_mapping import raise_user_error
from ..schemas.users import (
    DeletedUserRes,
    DeleteUserEnvelope,
    PageMeta,
    UserEnvelope,
    UserListEnvelope,
    UserMessageEnvelope,
    UserRes,
)

router = APIRouter(prefix="/users", tags=["users"])

CREATED_MESSAGE = "User created successfully"
UPDATED_MESSAGE = "User updated successfully"
DELETED_MESSAGE = "User successfully deleted"


@router.post("", response_model=UserMessageEnvelope, status_code=201)
def create_user(
    payload: Any = Body(None),
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
):
    result = use_case.execute(payload)
    if result.error is not None:
        raise_user_error(result.error)
    if result.user is None:
        raise internal_error()

    return UserMessageEnvelope(
        message=CREATED_MESSAGE, data=UserRes.from_entity(result.user)
    )


@router.get("", response_model=UserListEnvelope)
def list_users(
    search: str | None = Query(None, description="Global search term"),
    search_key: str | None = Query(None, alias="searchKey"),
    search_value: str | None = Query(None, alias="searchValue"),
    sort_field: str | None = Query(None, alias="sortField"),
    sort: str | None = Query(None, description="Alias of sortField"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    order: str | None = Query(None, description="Alias of sortOrder"),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
):
    params = RawListParams(
        search=search,
        search_key=search_key,
        search_value=search_value,
        sort_field=sort_field if sort_field is not None else sort,
        sort_order=sort_order if sort_order is not None else order,
        page=page,
        limit=limit,
    )
    result = use_case.execute(params)
    if result.error is not None:
        raise_user_error(result.error)

    return UserListEnvelope(
        data=[UserRes.from_entity(u) for u in result.users],
        meta=PageMeta(
            total_records=result.total,
            total_pages=result.total_pages,
            current_page=result.page,
            limit=result.limit,
        ),
    )


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(
    user_id: str,
    use_case: GetUserUseCase = Depends(get_get_user_use_case),
):
    result = use_case.execute(user_id)
    if result.error is not None:
        raise_user_error(result.error)
    if result.user is None:
        raise internal_error()

    return UserEnvelope(data=UserRes.from_entity(result.user))


@router.put("/{user_id}", response_model=UserMessageEnvelope)
def update_user(
    user_id: str,
    payload: Any = Body(None),
    use_case: UpdateUserUseCase = Depends(get_update_user_use_case),
):
    result = use_case.execute(user_id, payload)
    if result.error is not None:
        raise_user_error(result.error)
    if result.user is None:
        raise internal_error()

    return UserMessageEnvelope(
        message=UPDATED_MESSAGE, data=UserRes.from_entity(result.user)
    )


@router.delete("/{user_id}", response_model=DeleteUserEnvelope)
def delete_user(
    user_id: str,
    use_case: DeleteUserUseCase = Depends(get_delete_user_use_case),
):
    result = use_case.execute(user_id)
    if result.error is not None:
        raise_user_error(result.error)
    if result.user_id is None:
        raise internal_error()

    return DeleteUserEnvelope(
        message=DELETED_MESSAGE, data=DeletedUserRes(id=result.user_id)
    )
