"""
Shared fixtures for adversarial tests.

Every attack runs against both storage backends: the in-memory stores
always, PostgreSQL when a database is reachable.
"""

from dataclasses import dataclass

import pytest

from src.adapters.repository.memory import InMemoryTokenStore, InMemoryUserStore
from src.adapters.repository.postgres import PostgresTokenStore, PostgresUserStore
from src.domain.password_reset import PasswordResetProtocol
from src.domain.ports import TokenStore, UserStore
from src.domain.registration import RegistrationService
from src.domain.verification import SignedLinkVerifier
from tests.helpers import TEST_ROUTE

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@dataclass
class Stores:
    users: UserStore
    tokens: TokenStore


@pytest.fixture(params=["memory", "postgres"])
def stores(request: pytest.FixtureRequest, clock) -> Stores:
    """User and token stores for the parametrized backend."""
    if request.param == "memory":
        users = InMemoryUserStore()
        return Stores(users=users, tokens=InMemoryTokenStore(users, clock))

    pool = request.getfixturevalue("pool")
    request.getfixturevalue("clean_database")
    return Stores(users=PostgresUserStore(pool), tokens=PostgresTokenStore(pool))


@pytest.fixture
def registration(stores, password_hasher, email_sender, link_issuer, clock, events):
    return RegistrationService(
        user_store=stores.users,
        password_hasher=password_hasher,
        email_sender=email_sender,
        link_issuer=link_issuer,
        clock=clock,
        events=events,
    )


@pytest.fixture
def verifier(stores, signer, email_hasher, clock, events) -> SignedLinkVerifier:
    return SignedLinkVerifier(
        route=TEST_ROUTE,
        user_store=stores.users,
        signature_service=signer,
        hash_service=email_hasher,
        clock=clock,
        events=events,
    )


@pytest.fixture
def reset_protocol(stores, password_hasher, email_sender, clock, events):
    return PasswordResetProtocol(
        user_store=stores.users,
        token_store=stores.tokens,
        password_hasher=password_hasher,
        email_sender=email_sender,
        clock=clock,
        events=events,
        reset_url="http://localhost:3000/reset-password",
    )
