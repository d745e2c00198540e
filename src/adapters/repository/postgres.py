"""
PostgreSQL repository adapters - Implement UserStore and TokenStore protocols.

This module provides the PostgreSQL implementations of the domain's
persistence ports using psycopg3 with raw SQL.

Atomicity
---------
- mark_verified only updates rows whose email_verified_at IS NULL, so two
  concurrent verifications of the same user perform exactly one transition
  and only one of them reports it.
- validate_and_consume locks the token row with SELECT ... FOR UPDATE and
  deletes it in the same transaction. A concurrent request with the same
  token blocks on the lock and then finds no row, so it sees INVALID.

Reset tokens are stored as SHA-256 hashes and compared with
secrets.compare_digest(); a dummy hash keeps the comparison running when
no token row exists.
"""

import hashlib
import logging
import secrets
from datetime import datetime
from pathlib import Path
from typing import Any

from psycopg_pool import ConnectionPool

from src.domain.ports import TokenVerdict
from src.domain.users import Role, User

logger = logging.getLogger(__name__)

_USER_COLUMNS = """
    id, username, email, password_hash, role, permissions,
    email_verified_at, remember_token, name, created_at
"""

_DUMMY_TOKEN_HASH = "0" * 64


def hash_reset_token(token: str) -> str:
    """Return the SHA-256 hex digest stored in place of a reset token."""
    return hashlib.sha256(token.encode()).hexdigest()


def _row_to_user(row: tuple[Any, ...]) -> User:
    return User(
        id=row[0],
        username=row[1],
        email=row[2],
        password_hash=row[3],
        role=Role(row[4]),
        permissions=frozenset(row[5] or []),
        email_verified_at=row[6],
        remember_token=row[7],
        name=row[8],
        created_at=row[9],
    )


class PostgresUserStore:
    """
    Implements UserStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def _find_one(self, where: str, value: Any) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE {where} = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (value,))
            row = cursor.fetchone()
        return _row_to_user(row) if row is not None else None

    def find_by_id(self, user_id: int) -> User | None:
        return self._find_one("id", user_id)

    def find_by_email(self, email: str) -> User | None:
        return self._find_one("email", email)

    def find_by_username(self, username: str) -> User | None:
        return self._find_one("username", username)

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
        name: str | None = None,
        email_verified_at: datetime | None = None,
    ) -> User | None:
        """
        Insert a user unless the username or email is taken.

        ON CONFLICT DO NOTHING covers both UNIQUE constraints, so concurrent
        registrations of the same email create exactly one row.
        """
        sql = f"""
            INSERT INTO users (username, email, password_hash, role, name, email_verified_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON CONFLICT DO NOTHING
            RETURNING {_USER_COLUMNS}
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql, (username, email, password_hash, role.value, name, email_verified_at)
            )
            row = cursor.fetchone()
            conn.commit()
        return _row_to_user(row) if row is not None else None

    def mark_verified(self, user_id: int, verified_at: datetime) -> bool:
        sql = """
            UPDATE users
            SET email_verified_at = %s, updated_at = NOW()
            WHERE id = %s AND email_verified_at IS NULL
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (verified_at, user_id))
            conn.commit()
            return cursor.rowcount == 1

    def set_password(self, email: str, password_hash: str, remember_token: str) -> bool:
        sql = """
            UPDATE users
            SET password_hash = %s, remember_token = %s, updated_at = NOW()
            WHERE email = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (password_hash, remember_token, email))
            conn.commit()
            return cursor.rowcount == 1


class PostgresTokenStore:
    """
    Implements TokenStore protocol via psycopg3.

    Token expiry is checked against database time (NOW()).
    """

    def __init__(self, pool: ConnectionPool, ttl_seconds: int = 3600) -> None:
        self._pool = pool
        self._ttl_seconds = ttl_seconds

    def create(self, email: str, token: str) -> None:
        sql = """
            INSERT INTO password_reset_tokens (email, token_hash, created_at)
            VALUES (%s, %s, NOW())
            ON CONFLICT (email) DO UPDATE
            SET token_hash = EXCLUDED.token_hash,
                created_at = NOW()
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email, hash_reset_token(token)))
            conn.commit()

    def validate_and_consume(self, email: str, token: str) -> TokenVerdict:
        user_sql = "SELECT 1 FROM users WHERE email = %s"

        select_sql = """
            SELECT token_hash, created_at > NOW() - %s * INTERVAL '1 second'
            FROM password_reset_tokens
            WHERE email = %s
            FOR UPDATE
        """

        delete_sql = "DELETE FROM password_reset_tokens WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(user_sql, (email,))
            if cursor.fetchone() is None:
                conn.commit()
                return TokenVerdict.USER_NOT_FOUND

            cursor.execute(select_sql, (self._ttl_seconds, email))
            row = cursor.fetchone()

            stored_hash = row[0] if row is not None else _DUMMY_TOKEN_HASH
            token_valid = secrets.compare_digest(
                stored_hash.encode(), hash_reset_token(token).encode()
            )

            if row is None or not token_valid:
                conn.commit()
                return TokenVerdict.INVALID

            # Expired tokens are removed on first use
            cursor.execute(delete_sql, (email,))
            conn.commit()
            return TokenVerdict.VALID if row[1] else TokenVerdict.INVALID


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
