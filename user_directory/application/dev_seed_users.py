"""
===============================================================================
TASK: Dev Seed Users (opt-in)
===============================================================================

What it is:
    Inserts the demo directory used by local development and UI demos.

Guard:
    - Only runs when Settings.dev_seed_users is true.

Patterns:
    - Goes through CreateUserUseCase, so seeds are validated and
      fingerprinted exactly like client records.
    - Idempotent: a CONFLICT means the user is already there.

CRC:
    Component: ensure_dev_users
    Collaborators:
      - CreateUserUseCase
      - Settings
===============================================================================
"""

from __future__ import annotations

from typing import Final, Mapping, Sequence

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from .usecases.users.create_user import CreateUserUseCase
from .usecases.users.user_results import UserErrorCode

DEMO_USERS: Final[Sequence[Mapping[str, str]]] = (
    {
        "first_name": "Desi",
        "last_name": "Christoforou",
        "email": "dchristoforou0@miibeian.gov.cn",
        "gender": "Male",
        "status": "Active",
    },
    {
        "first_name": "Skylar",
        "last_name": "Glenny",
        "email": "sglenny1@noaa.gov",
        "gender": "Male",
        "status": "Active",
    },
    {
        "first_name": "Griffin",
        "last_name": "Gilffillan",
        "email": "ggilffillan2@yelp.com",
        "gender": "Male",
        "status": "Active",
    },
    {
        "first_name": "Wilmer",
        "last_name": "Crotch",
        "email": "wcrotch3@webs.com",
        "gender": "Male",
        "status": "Active",
    },
    {
        "first_name": "Faith",
        "last_name": "Fitzackerley",
        "email": "ffitzackerley4@opensource.org",
        "gender": "Female",
        "status": "Inactive",
    },
)


def ensure_dev_users(
    settings: Settings,
    create_user: CreateUserUseCase,
    users: Sequence[Mapping[str, str]] = DEMO_USERS,
) -> int:
    """
    Insert the demo users that are missing.

    Returns the number of users created. Any error other than CONFLICT is
    logged and skipped so a bad seed row never blocks startup.
    """
    if not settings.dev_seed_users:
        return 0

    created = 0
    for payload in users:
        result = create_user.execute(dict(payload))
        if result.error is None:
            created += 1
            continue
        if result.error.code == UserErrorCode.CONFLICT:
            continue
        logger.warning(
            "Dev seed users: skipped invalid seed row",
            extra={"email": payload.get("email"), "reason": result.error.message},
        )

    logger.info(
        "Dev seed users: done",
        extra={"created_count": created, "total": len(users)},
    )
    return created
