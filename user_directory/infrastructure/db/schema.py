"""
Bootstrap DDL for the users table.

Not a migration tool: CREATE ... IF NOT EXISTS only, run at startup when
DB_ENSURE_SCHEMA is enabled.
"""

from __future__ import annotations

from ...crosscutting.exceptions import DatabaseError
from ...crosscutting.logger import logger

FINGERPRINT_CONSTRAINT = "users_fingerprint_key"

USERS_DDL = f"""
CREATE TABLE IF NOT EXISTS users (
    id          UUID PRIMARY KEY,
    first_name  VARCHAR(30) NOT NULL,
    last_name   VARCHAR(30) NOT NULL,
    email       VARCHAR(254) NOT NULL,
    gender      VARCHAR(16) NOT NULL,
    status      VARCHAR(16) NOT NULL DEFAULT 'Active',
    fingerprint CHAR(64) NOT NULL,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT {FINGERPRINT_CONSTRAINT} UNIQUE (fingerprint)
)
"""


def ensure_schema(pool) -> None:
    try:
        with pool.connection() as conn:
            conn.execute(USERS_DDL)
    except Exception as exc:
        logger.exception("ensure_schema failed")
        raise DatabaseError("Could not create the users table", original_error=exc) from exc
    logger.info("users table ensured")
