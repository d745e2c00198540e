"""Repository adapters - Database and in-memory implementations."""

from .memory import InMemoryTokenStore, InMemoryUserStore
from .postgres import PostgresTokenStore, PostgresUserStore, hash_reset_token, run_migrations

__all__ = [
    "InMemoryTokenStore",
    "InMemoryUserStore",
    "PostgresTokenStore",
    "PostgresUserStore",
    "hash_reset_token",
    "run_migrations",
]
