"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account verification core: the signed link
verifier, the password reset protocol, the shared Outcome model and its
response shapes, plus registration and login. It defines its own port
interfaces for infrastructure abstraction.
"""

from .exceptions import (
    AuthError,
    EmailAlreadyRegistered,
    EmailNotVerified,
    InvalidCredentials,
    PasswordPolicyViolation,
)
from .outcome import (
    EmailVerified,
    ErrorCode,
    Messages,
    Outcome,
    PasswordWasReset,
    ResetCredentials,
    UserRegistered,
    VerificationCredentials,
)
from .password_reset import PasswordResetProtocol
from .ports import (
    Clock,
    EmailSender,
    EventDispatcher,
    HashService,
    PasswordHasher,
    SignatureService,
    TokenStore,
    TokenVerdict,
    UserStore,
)
from .registration import RegistrationService
from .responses import to_api_shape, to_web_shape
from .signing import HmacSignatureService, Sha1EmailHasher, SignedLinkIssuer, VerificationLink
from .users import Role, User
from .verification import SignedLinkVerifier

__all__ = [
    "AuthError",
    "Clock",
    "EmailAlreadyRegistered",
    "EmailNotVerified",
    "EmailSender",
    "EmailVerified",
    "ErrorCode",
    "EventDispatcher",
    "HashService",
    "HmacSignatureService",
    "InvalidCredentials",
    "Messages",
    "Outcome",
    "PasswordHasher",
    "PasswordPolicyViolation",
    "PasswordResetProtocol",
    "PasswordWasReset",
    "RegistrationService",
    "ResetCredentials",
    "Role",
    "SignatureService",
    "Sha1EmailHasher",
    "SignedLinkIssuer",
    "SignedLinkVerifier",
    "TokenStore",
    "TokenVerdict",
    "User",
    "UserRegistered",
    "UserStore",
    "VerificationCredentials",
    "VerificationLink",
    "to_api_shape",
    "to_web_shape",
]
