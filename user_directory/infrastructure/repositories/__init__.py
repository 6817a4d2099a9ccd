"""
Repository implementations.

- postgres: PostgresUserRepository (psycopg 3 + psycopg_pool)
- in_memory: InMemoryUserRepository (tests / local dev)
"""

from .in_memory import InMemoryUserRepository
from .postgres import PostgresUserRepository

__all__ = ["InMemoryUserRepository", "PostgresUserRepository"]
