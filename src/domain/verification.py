"""
Email verification - signed link verification protocol.

Checks run in a fixed order and stop at the first failure:

    lookup -> already verified -> signature -> expiry -> email hash

An already-verified user short-circuits to success before any signature
or expiry check, so clicking a verification link a second time (or an
old copy of it) never reports an error.

Only two failure codes leave this module: USER_NOT_FOUND when the id is
unknown, and INVALID_VERIFICATION_LINK for everything else, including
unexpected collaborator errors.
"""

import logging
from dataclasses import dataclass

from .outcome import EmailVerified, ErrorCode, Messages, Outcome, VerificationCredentials
from .ports import Clock, EventDispatcher, HashService, SignatureService, UserStore
from .signing import verification_link_payload

logger = logging.getLogger(__name__)

_INVALID_LINK = Outcome.fail(ErrorCode.INVALID_VERIFICATION_LINK, Messages.INVALID_VERIFICATION_LINK)


@dataclass
class SignedLinkVerifier:
    """
    Domain service that verifies email verification links.

    All collaborators are injected; the verifier holds no state between
    calls.
    """

    route: str
    user_store: UserStore
    signature_service: SignatureService
    hash_service: HashService
    clock: Clock
    events: EventDispatcher

    def verify(self, credentials: VerificationCredentials) -> Outcome:
        """
        Verify a signed link and mark the user's email as verified.

        Args:
            credentials: id, email hash, expiry and signature from the link

        Returns:
            Outcome - success with the user snapshot, or a failure code
        """
        try:
            user = self.user_store.find_by_id(credentials.user_id)
        except Exception:
            logger.exception("User lookup failed during email verification")
            return _INVALID_LINK

        if user is None:
            return Outcome.fail(ErrorCode.USER_NOT_FOUND, Messages.VERIFY_USER_NOT_FOUND)

        try:
            if user.has_verified_email():
                return Outcome.ok(Messages.EMAIL_ALREADY_VERIFIED, user=user.snapshot())

            if not self._signature_matches(credentials):
                logger.info("Rejected verification link for user %s: bad signature", user.id)
                return _INVALID_LINK

            now = self.clock.now()
            if int(now.timestamp()) > credentials.expires:
                logger.info("Rejected verification link for user %s: expired", user.id)
                return _INVALID_LINK

            # Binds the link to the current address; a link issued before an
            # email change stops working.
            current_hash = self.hash_service.digest(user.email)
            if not self.signature_service.verify_constant_time(
                current_hash, credentials.email_hash
            ):
                logger.info("Rejected verification link for user %s: email hash", user.id)
                return _INVALID_LINK

            # A concurrent duplicate loses the NULL -> timestamp race and
            # returns False; it still reports success but publishes nothing.
            if self.user_store.mark_verified(user.id, now):
                self.events.dispatch(EmailVerified(user_id=user.id, email=user.email, verified_at=now))
            user.email_verified_at = now
            return Outcome.ok(Messages.EMAIL_VERIFIED, user=user.snapshot())
        except Exception:
            logger.exception("Email verification failed for user %s", credentials.user_id)
            return _INVALID_LINK

    def _signature_matches(self, credentials: VerificationCredentials) -> bool:
        payload = verification_link_payload(
            self.route, credentials.user_id, credentials.email_hash, credentials.expires
        )
        expected = self.signature_service.sign(payload)
        return self.signature_service.verify_constant_time(expected, credentials.signature)
