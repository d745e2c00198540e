"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Stores are created once during app lifespan and kept in app.state.
"""

from functools import lru_cache

from fastapi import Request

from src.adapters.events.logging_dispatcher import LoggingEventDispatcher
from src.adapters.security.clock import SystemClock
from src.adapters.security.hashing import BcryptPasswordHasher
from src.adapters.smtp.console import ConsoleEmailSender
from src.config.settings import Settings, get_settings
from src.domain.password_reset import PasswordResetProtocol
from src.domain.ports import TokenStore, UserStore
from src.domain.registration import RegistrationService
from src.domain.signing import HmacSignatureService, Sha1EmailHasher, SignedLinkIssuer
from src.domain.verification import SignedLinkVerifier

# Module-level singletons - these adapters are stateless
_email_sender = ConsoleEmailSender()
_clock = SystemClock()
_events = LoggingEventDispatcher()
_email_hasher = Sha1EmailHasher()


def get_user_store(request: Request) -> UserStore:
    """Get the user store created during app lifespan startup."""
    return request.app.state.user_store


def get_token_store(request: Request) -> TokenStore:
    """Get the reset token store created during app lifespan startup."""
    return request.app.state.token_store


def get_email_sender() -> ConsoleEmailSender:
    """Get console email sender (singleton)."""
    return _email_sender


def get_event_dispatcher() -> LoggingEventDispatcher:
    """Get the event dispatcher (singleton)."""
    return _events


@lru_cache
def get_password_hasher() -> BcryptPasswordHasher:
    """Get the bcrypt hasher configured with the settings cost factor."""
    return BcryptPasswordHasher(rounds=get_settings().bcrypt_cost)


@lru_cache
def get_signature_service() -> HmacSignatureService:
    """Get the link signer keyed with the application key."""
    return HmacSignatureService(get_settings().app_key)


def get_link_issuer(settings: Settings | None = None) -> SignedLinkIssuer:
    settings = settings or get_settings()
    return SignedLinkIssuer(
        route=settings.verification_route,
        signature_service=get_signature_service(),
        hash_service=_email_hasher,
        ttl_seconds=settings.verification_ttl_seconds,
    )


def get_link_verifier(request: Request) -> SignedLinkVerifier:
    """Create the signed link verifier with injected collaborators."""
    settings = get_settings()
    return SignedLinkVerifier(
        route=settings.verification_route,
        user_store=get_user_store(request),
        signature_service=get_signature_service(),
        hash_service=_email_hasher,
        clock=_clock,
        events=get_event_dispatcher(),
    )


def get_password_reset_protocol(request: Request) -> PasswordResetProtocol:
    """Create the password reset protocol with injected collaborators."""
    settings = get_settings()
    return PasswordResetProtocol(
        user_store=get_user_store(request),
        token_store=get_token_store(request),
        password_hasher=get_password_hasher(),
        email_sender=get_email_sender(),
        clock=_clock,
        events=get_event_dispatcher(),
        reset_url=settings.password_reset_url,
    )


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the user store, hasher, link issuer and email sender.
    """
    settings = get_settings()
    return RegistrationService(
        user_store=get_user_store(request),
        password_hasher=get_password_hasher(),
        email_sender=get_email_sender(),
        link_issuer=get_link_issuer(settings),
        clock=_clock,
        events=get_event_dispatcher(),
        require_email_verification=settings.require_email_verification,
    )
