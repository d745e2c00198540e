"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols structurally.
"""

from datetime import datetime
from enum import Enum
from typing import Protocol

from .users import Role, User


class TokenVerdict(Enum):
    """
    Result of an atomic reset-token check.

    Used by validate_and_consume() to indicate whether the token was
    accepted (and consumed) or why it was rejected.
    """

    VALID = "valid"
    USER_NOT_FOUND = "user_not_found"
    INVALID = "invalid"


class UserStore(Protocol):
    """Port interface for user persistence."""

    def find_by_id(self, user_id: int) -> User | None:
        """Return the user with the given id, or None."""
        ...

    def find_by_email(self, email: str) -> User | None:
        """Return the user with the given normalized email, or None."""
        ...

    def find_by_username(self, username: str) -> User | None:
        """Return the user with the given username, or None."""
        ...

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
        Insert a new user.

        Returns:
            The created user, or None if the username or email is taken
        """
        ...

    def mark_verified(self, user_id: int, verified_at: datetime) -> bool:
        """
        Set email_verified_at for a still-unverified user.

        Safe to call twice: only the call that performs the
        NULL -> timestamp transition returns True.
        """
        ...

    def set_password(self, email: str, password_hash: str, remember_token: str) -> bool:
        """
        Replace the password hash and rotate the remember token.

        Returns:
            True if a user row was updated
        """
        ...


class TokenStore(Protocol):
    """Port interface for password reset token persistence."""

    def create(self, email: str, token: str) -> None:
        """
        Store a reset token for an email, replacing any previous one.

        Implementations persist a one-way hash of the token, never the
        plaintext.
        """
        ...

    def validate_and_consume(self, email: str, token: str) -> TokenVerdict:
        """
        Check a reset token and delete it in the same atomic step.

        Return values by scenario:
        - VALID: token matches, is unexpired and bound to email; it is consumed
        - USER_NOT_FOUND: no user is registered with this email
        - INVALID: token wrong, expired or already consumed

        Two concurrent calls with the same valid token must not both
        return VALID.
        """
        ...


class SignatureService(Protocol):
    """Port interface for keyed link signatures."""

    def sign(self, payload: str) -> str:
        """Return the signature of payload."""
        ...

    def verify_constant_time(self, expected: str, supplied: str) -> bool:
        """Compare two signatures in constant time."""
        ...


class HashService(Protocol):
    """Port interface for the one-way email binding hash."""

    def digest(self, value: str) -> str:
        """Return the hex digest of value."""
        ...


class PasswordHasher(Protocol):
    """Port interface for password hashing."""

    def hash(self, password: str) -> str:
        """Hash a plaintext password."""
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plaintext password against a stored hash."""
        ...


class Clock(Protocol):
    """Port interface for the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC time."""
        ...


class EventDispatcher(Protocol):
    """Port interface for publishing domain events."""

    def dispatch(self, event: object) -> None:
        """Publish a domain event to observers."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_link(self, email: str, url: str) -> None:
        """
        Send an email verification link.

        Args:
            email: Recipient email address
            url: Signed verification URL
        """
        ...

    def send_password_reset_link(self, email: str, url: str) -> None:
        """
        Send a password reset link.

        Args:
            email: Recipient email address
            url: Reset URL carrying the plaintext token
        """
        ...
