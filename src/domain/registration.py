"""
Registration domain service - account creation, login and verification mail.

Registration creates an unverified user and emails a signed verification
link (see signing.py / verification.py). When email verification is
disabled the account is created already verified.

Login accepts an email or a username. Only regular users log in through
this service; admin roles are refused with the same generic error as a
wrong password. The password check always runs, against a dummy hash for
unknown logins, so response time does not reveal whether an account
exists.
"""

import logging
from dataclasses import dataclass, field

from .exceptions import EmailAlreadyRegistered, EmailNotVerified, InvalidCredentials
from .outcome import UserRegistered
from .password_policy import validate_password
from .ports import Clock, EmailSender, EventDispatcher, PasswordHasher, UserStore
from .signing import SignedLinkIssuer
from .users import Role, User

logger = logging.getLogger(__name__)


@dataclass
class RegistrationService:
    """
    Domain service for user registration and login.

    Orchestrates the registration flow: email normalization, password
    policy, password hashing, persistence and verification mail.
    """

    user_store: UserStore
    password_hasher: PasswordHasher
    email_sender: EmailSender
    link_issuer: SignedLinkIssuer
    clock: Clock
    events: EventDispatcher
    require_email_verification: bool = True
    _dummy_hash: str | None = field(default=None, init=False, repr=False)

    def register(
        self, username: str, email: str, password: str, name: str | None = None
    ) -> User:
        """
        Register a new user.

        Args:
            username: Unique login name
            email: User's email address (will be normalized)
            password: User's password (policy-checked, then hashed)
            name: Optional display name (defaults to username)

        Returns:
            The created user

        Raises:
            PasswordPolicyViolation: If the password breaks the policy
            EmailAlreadyRegistered: If the username or email is taken
        """
        validate_password(password)
        normalized_email = self._normalize_email(email)
        password_hash = self.password_hasher.hash(password)
        verified_at = None if self.require_email_verification else self.clock.now()

        user = self.user_store.create(
            username=username.strip(),
            email=normalized_email,
            password_hash=password_hash,
            role=Role.USER,
            name=name or username.strip(),
            email_verified_at=verified_at,
        )
        if user is None:
            raise EmailAlreadyRegistered(normalized_email)

        self.events.dispatch(UserRegistered(user_id=user.id, email=user.email))
        if self.require_email_verification:
            self._send_verification_link(user)
        return user

    def login(self, login: str, password: str) -> User:
        """
        Authenticate a regular user by email or username.

        Raises:
            InvalidCredentials: Unknown login, wrong password or non-user role
            EmailNotVerified: Email verification required but not done yet
        """
        login = login.strip()
        if "@" in login:
            user = self.user_store.find_by_email(self._normalize_email(login))
        else:
            user = self.user_store.find_by_username(login)

        stored_hash = user.password_hash if user is not None else self._get_dummy_hash()
        password_valid = self.password_hasher.verify(password, stored_hash)

        if user is None or user.role != Role.USER:
            logger.warning("Login failed for %s: unknown login or non-user role", login)
            raise InvalidCredentials(login)
        if not password_valid:
            logger.warning("Login failed for %s: invalid password", login)
            raise InvalidCredentials(login)

        if self.require_email_verification and not user.has_verified_email():
            raise EmailNotVerified(user.email)

        logger.info("Login succeeded for user %s", user.id)
        return user

    def resend_verification(self, email: str) -> None:
        """
        Send a fresh verification link to an unverified user.

        Silently does nothing for unknown or already verified emails.
        """
        user = self.user_store.find_by_email(self._normalize_email(email))
        if user is None or user.has_verified_email():
            return
        self._send_verification_link(user)

    def _send_verification_link(self, user: User) -> None:
        link = self.link_issuer.issue(user, self.clock.now())
        self.email_sender.send_verification_link(user.email, link.url)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.password_hasher.hash("dummy_password_for_timing_safety")
        return self._dummy_hash

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()
