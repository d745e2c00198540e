"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock
- Recording doubles for the email sender and event dispatcher
- Link signing services keyed with a test key
- A PostgreSQL connection pool for integration and adversarial tests
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from src.domain.signing import HmacSignatureService, Sha1EmailHasher, SignedLinkIssuer
from tests.helpers import (
    TEST_KEY,
    TEST_ROUTE,
    FixedClock,
    PlainPasswordHasher,
    RecordingEmailSender,
    RecordingEventDispatcher,
)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def events() -> RecordingEventDispatcher:
    return RecordingEventDispatcher()


@pytest.fixture
def password_hasher() -> PlainPasswordHasher:
    return PlainPasswordHasher()


@pytest.fixture
def signer() -> HmacSignatureService:
    return HmacSignatureService(TEST_KEY)


@pytest.fixture
def email_hasher() -> Sha1EmailHasher:
    return Sha1EmailHasher()


@pytest.fixture
def link_issuer(signer: HmacSignatureService, email_hasher: Sha1EmailHasher) -> SignedLinkIssuer:
    return SignedLinkIssuer(
        route=TEST_ROUTE,
        signature_service=signer,
        hash_service=email_hasher,
        ttl_seconds=3600,
    )


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """
    Create connection pool for database tests.

    Skips the requesting module when PostgreSQL is not reachable.
    Migrations run once per module; each test cleans up via clean_database.
    """
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=3)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {settings.database_url}")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty the users and reset token tables before a test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM password_reset_tokens")
        conn.execute("DELETE FROM users")
        conn.commit()
    yield
