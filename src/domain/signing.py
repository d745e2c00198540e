"""
Signing primitives for email verification links.

A verification link binds a user id, a SHA-1 hash of the user's email and
an expiry timestamp under an HMAC-SHA256 signature:

    {route}/{user_id}/{email_hash}?expires={expires}&signature={hmac}

The signature covers everything before "&signature=". Verification
recomputes it from the submitted parameters, so a link is only accepted
if it was issued with the same key for the same route.
"""

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta

from .ports import HashService, SignatureService
from .users import User


class HmacSignatureService:
    """
    Implements SignatureService with HMAC-SHA256.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, key: str) -> None:
        if not key:
            raise ValueError("Signing key must not be empty")
        self._key = key.encode()

    def sign(self, payload: str) -> str:
        return hmac.new(self._key, payload.encode(), hashlib.sha256).hexdigest()

    def verify_constant_time(self, expected: str, supplied: str) -> bool:
        return hmac.compare_digest(expected.encode(), supplied.encode())


class Sha1EmailHasher:
    """Implements HashService with unkeyed SHA-1 (email binding only)."""

    def digest(self, value: str) -> str:
        return hashlib.sha1(value.encode()).hexdigest()


def verification_link_payload(route: str, user_id: int, email_hash: str, expires: int) -> str:
    """Build the canonical string that a verification signature covers."""
    return f"{route.rstrip('/')}/{user_id}/{email_hash}?expires={expires}"


@dataclass(frozen=True)
class VerificationLink:
    """An issued, signed verification link and its parts."""

    url: str
    user_id: int
    email_hash: str
    expires: int
    signature: str


@dataclass
class SignedLinkIssuer:
    """
    Issues signed email verification links.

    Shares the route and services with SignedLinkVerifier; a link issued
    here verifies there as long as both use the same key and route.
    """

    route: str
    signature_service: SignatureService
    hash_service: HashService
    ttl_seconds: int = 3600

    def issue(self, user: User, now: datetime) -> VerificationLink:
        email_hash = self.hash_service.digest(user.email)
        expires = int((now + timedelta(seconds=self.ttl_seconds)).timestamp())
        payload = verification_link_payload(self.route, user.id, email_hash, expires)
        signature = self.signature_service.sign(payload)
        return VerificationLink(
            url=f"{payload}&signature={signature}",
            user_id=user.id,
            email_hash=email_hash,
            expires=expires,
            signature=signature,
        )
