"""
Domain exceptions - Semantic error types for registration and login.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

The verification and reset protocols do not raise these; they report
expected failures through Outcome values instead.
"""


class AuthError(Exception):
    """Base class for authentication domain errors."""

    pass


class EmailAlreadyRegistered(AuthError):
    """Email or username already belongs to an account."""

    pass


class InvalidCredentials(AuthError):
    """Unknown login, wrong password, or role not allowed to log in."""

    pass


class EmailNotVerified(AuthError):
    """Login refused until the email address is verified."""

    pass


class PasswordPolicyViolation(AuthError):
    """Password does not satisfy the password policy."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
