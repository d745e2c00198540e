"""
Test doubles shared across the test suite.

Plain classes rather than Mock so that tests can assert on what was
recorded without reaching into call_args.
"""

from datetime import UTC, datetime, timedelta

from src.domain.users import User

TEST_KEY = "test-signing-key"
TEST_ROUTE = "http://localhost:8000/email/verify"
FIXED_NOW = datetime(2025, 9, 7, 12, 0, 0, tzinfo=UTC)
VALID_PASSWORD = "Abc123!@"


class FixedClock:
    """Clock double that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current = self.current + timedelta(seconds=seconds)


class RecordingEmailSender:
    """EmailSender double that keeps every sent link."""

    def __init__(self) -> None:
        self.verification_links: list[tuple[str, str]] = []
        self.reset_links: list[tuple[str, str]] = []

    def send_verification_link(self, email: str, url: str) -> None:
        self.verification_links.append((email, url))

    def send_password_reset_link(self, email: str, url: str) -> None:
        self.reset_links.append((email, url))


class RecordingEventDispatcher:
    """EventDispatcher double that keeps every dispatched event."""

    def __init__(self) -> None:
        self.events: list[object] = []

    def dispatch(self, event: object) -> None:
        self.events.append(event)


class PlainPasswordHasher:
    """PasswordHasher double without bcrypt's deliberate slowness."""

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed:{password}"


def make_user(**overrides) -> User:
    """Build a user with sensible defaults."""
    fields = {
        "id": 42,
        "username": "testuser",
        "email": "test@example.com",
        "password_hash": "hashed:Abc123!@",
    }
    fields.update(overrides)
    return User(**fields)
