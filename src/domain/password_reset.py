"""
Password reset - token based reset protocol.

Flow:
1. request_reset(email) issues a random single-use token, stores its hash
   and emails the plaintext token to the user.
2. reset_password(credentials) asks the token store to validate and
   consume the token in one atomic step, then stores the new password
   hash and rotates the remember token.

Token store verdicts map to outcomes as follows:

    VALID          -> success "password reset"
    USER_NOT_FOUND -> failure USER_NOT_FOUND
    INVALID        -> failure INVALID_RESET_TOKEN

Any unexpected collaborator error maps to INVALID_RESET_TOKEN.
"""

import logging
import secrets
from dataclasses import dataclass
from urllib.parse import urlencode

from .outcome import ErrorCode, Messages, Outcome, PasswordWasReset, ResetCredentials
from .ports import (
    Clock,
    EmailSender,
    EventDispatcher,
    PasswordHasher,
    TokenStore,
    TokenVerdict,
    UserStore,
)

logger = logging.getLogger(__name__)

REMEMBER_TOKEN_LENGTH = 60


@dataclass
class PasswordResetProtocol:
    """
    Domain service for password reset.

    Password policy is enforced by the caller before reset_password runs;
    this service only guards against a mismatched confirmation.
    """

    user_store: UserStore
    token_store: TokenStore
    password_hasher: PasswordHasher
    email_sender: EmailSender
    clock: Clock
    events: EventDispatcher
    reset_url: str

    def request_reset(self, email: str) -> Outcome:
        """
        Issue a reset token and email it.

        Returns the same success outcome whether or not the email belongs
        to an account, so the endpoint cannot be used to probe for users.
        """
        normalized_email = self._normalize_email(email)
        try:
            user = self.user_store.find_by_email(normalized_email)
            if user is None:
                logger.info("Password reset requested for unknown email")
            else:
                token = self._generate_token()
                self.token_store.create(user.email, token)
                self.email_sender.send_password_reset_link(
                    user.email, self._build_reset_url(user.email, token)
                )
        except Exception:
            logger.exception("Password reset request failed")
        return Outcome.ok(Messages.RESET_LINK_SENT, email=normalized_email)

    def reset_password(self, credentials: ResetCredentials) -> Outcome:
        """
        Consume a reset token and set the new password.

        Args:
            credentials: email, new password (+confirmation) and token

        Returns:
            Outcome carrying the email on success, or a failure code
        """
        email = self._normalize_email(credentials.email)

        if credentials.password != credentials.password_confirmation:
            return Outcome.fail(
                ErrorCode.VALIDATION_FAILED, Messages.PASSWORD_CONFIRMATION_MISMATCH, email=email
            )

        try:
            # Hash first: a password the hasher rejects must not burn the token.
            password_hash = self.password_hasher.hash(credentials.password)
            verdict = self.token_store.validate_and_consume(email, credentials.token)

            if verdict is TokenVerdict.USER_NOT_FOUND:
                return Outcome.fail(
                    ErrorCode.USER_NOT_FOUND, Messages.RESET_USER_NOT_FOUND, email=email
                )
            if verdict is not TokenVerdict.VALID:
                return Outcome.fail(
                    ErrorCode.INVALID_RESET_TOKEN, Messages.INVALID_RESET_TOKEN, email=email
                )

            # The token is already consumed here; a second request carrying
            # it gets INVALID from the store.
            if not self.user_store.set_password(
                email, password_hash, self._generate_remember_token()
            ):
                logger.warning("Reset token accepted but no user row was updated")
                return Outcome.fail(
                    ErrorCode.INVALID_RESET_TOKEN, Messages.INVALID_RESET_TOKEN, email=email
                )

            self.events.dispatch(PasswordWasReset(email=email, occurred_at=self.clock.now()))
            return Outcome.ok(Messages.PASSWORD_RESET, email=email)
        except Exception:
            logger.exception("Password reset failed")
            return Outcome.fail(
                ErrorCode.INVALID_RESET_TOKEN, Messages.INVALID_RESET_TOKEN, email=email
            )

    def _build_reset_url(self, email: str, token: str) -> str:
        return f"{self.reset_url}?{urlencode({'token': token, 'email': email})}"

    def _normalize_email(self, email: str) -> str:
        return email.strip().lower()

    def _generate_token(self) -> str:
        """Generate a URL-safe reset token with 384 bits of randomness."""
        return secrets.token_urlsafe(48)

    def _generate_remember_token(self) -> str:
        """Generate a fresh 60-character remember token."""
        return secrets.token_urlsafe(45)[:REMEMBER_TOKEN_LENGTH]
