"""
Adversarial tests for timing oracle attack prevention.

Verifies that login failures for unknown accounts and wrong passwords
take statistically similar time, so an attacker cannot enumerate
registered usernames or emails by measuring responses.

Defense: the bcrypt check runs on every login attempt, against a dummy
hash when the account does not exist.
"""

import statistics
import time

import pytest

from src.adapters.repository.memory import InMemoryUserStore
from src.adapters.security.hashing import BcryptPasswordHasher
from src.domain.exceptions import InvalidCredentials
from src.domain.registration import RegistrationService
from tests.helpers import (
    VALID_PASSWORD,
    FixedClock,
    RecordingEmailSender,
    RecordingEventDispatcher,
)

pytestmark = pytest.mark.adversarial


@pytest.fixture(scope="module")
def service() -> RegistrationService:
    """Registration service with a real bcrypt hasher and one known user."""
    service = RegistrationService(
        user_store=InMemoryUserStore(),
        password_hasher=BcryptPasswordHasher(rounds=10),
        email_sender=RecordingEmailSender(),
        link_issuer=None,  # type: ignore[arg-type]
        clock=FixedClock(),
        events=RecordingEventDispatcher(),
        require_email_verification=False,
    )
    service.register("known", "known@example.com", VALID_PASSWORD)
    return service


class TestTimingAttacks:
    """Measure login failure timings for known and unknown accounts."""

    ITERATIONS = 10

    # Maximum allowed difference in mean times
    MAX_VARIANCE_RATIO = 0.5

    def measure(self, service: RegistrationService, login: str) -> float:
        timings = []
        for _ in range(self.ITERATIONS):
            start = time.perf_counter()
            with pytest.raises(InvalidCredentials):
                service.login(login, "Wrong123!")
            timings.append(time.perf_counter() - start)
        return statistics.mean(timings)

    def test_unknown_account_and_wrong_password_take_similar_time(self, service) -> None:
        self.measure(service, "warmup")

        known = self.measure(service, "known")
        unknown = self.measure(service, "ghost")

        ratio = abs(known - unknown) / max(known, unknown)
        assert ratio < self.MAX_VARIANCE_RATIO, (
            f"Timing oracle: known={known * 1000:.1f}ms unknown={unknown * 1000:.1f}ms"
        )
