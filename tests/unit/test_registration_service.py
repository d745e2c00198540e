"""
Unit tests for RegistrationService domain logic.

Tests domain logic with mocked ports to verify:
- Email normalization
- Password policy and hashing
- Registration flow orchestration
- Login by email or username
- Verification link resending
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from src.domain.exceptions import (
    EmailAlreadyRegistered,
    EmailNotVerified,
    InvalidCredentials,
    PasswordPolicyViolation,
)
from src.domain.outcome import UserRegistered
from src.domain.registration import RegistrationService
from src.domain.users import Role
from tests.helpers import FIXED_NOW, VALID_PASSWORD, make_user


@pytest.fixture
def user_store() -> Mock:
    store = Mock()
    store.create.side_effect = lambda **fields: make_user(
        username=fields["username"],
        email=fields["email"],
        password_hash=fields["password_hash"],
        name=fields["name"],
        email_verified_at=fields["email_verified_at"],
    )
    store.find_by_email.return_value = make_user(email_verified_at=FIXED_NOW)
    store.find_by_username.return_value = make_user(email_verified_at=FIXED_NOW)
    return store


@pytest.fixture
def service(user_store, password_hasher, email_sender, link_issuer, clock, events):
    return RegistrationService(
        user_store=user_store,
        password_hasher=password_hasher,
        email_sender=email_sender,
        link_issuer=link_issuer,
        clock=clock,
        events=events,
    )


class TestEmailNormalization:
    """Tests for email normalization."""

    def test_normalize_email_strips_whitespace(self, service, user_store) -> None:
        service.register("testuser", "  user@example.com  ", VALID_PASSWORD)

        assert user_store.create.call_args.kwargs["email"] == "user@example.com"

    def test_normalize_email_lowercases(self, service, user_store) -> None:
        service.register("testuser", "USER@EXAMPLE.COM", VALID_PASSWORD)

        assert user_store.create.call_args.kwargs["email"] == "user@example.com"


class TestRegister:
    """Tests for the registration flow."""

    def test_password_is_hashed(self, service, user_store) -> None:
        service.register("testuser", "user@example.com", VALID_PASSWORD)

        password_hash = user_store.create.call_args.kwargs["password_hash"]
        assert password_hash != VALID_PASSWORD
        assert password_hash == f"hashed:{VALID_PASSWORD}"

    def test_weak_password_rejected_before_storage(self, service, user_store) -> None:
        with pytest.raises(PasswordPolicyViolation):
            service.register("testuser", "user@example.com", "password")

        user_store.create.assert_not_called()

    def test_user_is_created_unverified_with_user_role(self, service, user_store) -> None:
        user = service.register("testuser", "user@example.com", VALID_PASSWORD)

        kwargs = user_store.create.call_args.kwargs
        assert kwargs["role"] is Role.USER
        assert kwargs["email_verified_at"] is None
        assert user.has_verified_email() is False

    def test_name_defaults_to_username(self, service, user_store) -> None:
        service.register("testuser", "user@example.com", VALID_PASSWORD)

        assert user_store.create.call_args.kwargs["name"] == "testuser"

    def test_sends_signed_verification_link(self, service, email_sender) -> None:
        service.register("testuser", "user@example.com", VALID_PASSWORD)

        assert len(email_sender.verification_links) == 1
        email, url = email_sender.verification_links[0]
        assert email == "user@example.com"
        assert "/email/verify/42/" in url
        assert "signature=" in url

    def test_dispatches_registered_event(self, service, events) -> None:
        service.register("testuser", "user@example.com", VALID_PASSWORD)

        assert events.events == [UserRegistered(user_id=42, email="user@example.com")]

    def test_duplicate_raises_email_already_registered(
        self, service, user_store, email_sender, events
    ) -> None:
        user_store.create.side_effect = None
        user_store.create.return_value = None

        with pytest.raises(EmailAlreadyRegistered):
            service.register("testuser", "user@example.com", VALID_PASSWORD)

        assert email_sender.verification_links == []
        assert events.events == []

    def test_verification_disabled_creates_verified_user(
        self, service, user_store, email_sender, clock
    ) -> None:
        service.require_email_verification = False

        user = service.register("testuser", "user@example.com", VALID_PASSWORD)

        assert user_store.create.call_args.kwargs["email_verified_at"] == clock.now()
        assert user.has_verified_email() is True
        assert email_sender.verification_links == []


class TestLogin:
    """Tests for login by email or username."""

    def test_login_by_email(self, service, user_store) -> None:
        user = service.login("  Test@Example.com ", VALID_PASSWORD)

        user_store.find_by_email.assert_called_once_with("test@example.com")
        assert user.id == 42

    def test_login_by_username(self, service, user_store) -> None:
        service.login("testuser", VALID_PASSWORD)

        user_store.find_by_username.assert_called_once_with("testuser")
        user_store.find_by_email.assert_not_called()

    def test_wrong_password(self, service) -> None:
        with pytest.raises(InvalidCredentials):
            service.login("testuser", "Wrong123!")

    def test_unknown_login_still_checks_a_password(self, service, user_store) -> None:
        """Unknown logins run the hasher against a dummy hash."""
        user_store.find_by_username.return_value = None
        hasher = Mock(wraps=service.password_hasher)
        service.password_hasher = hasher

        with pytest.raises(InvalidCredentials):
            service.login("ghost", VALID_PASSWORD)

        hasher.verify.assert_called_once()

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.SUPER_ADMIN])
    def test_admin_roles_refused(self, service, user_store, role) -> None:
        user_store.find_by_username.return_value = make_user(role=role, email_verified_at=FIXED_NOW)

        with pytest.raises(InvalidCredentials):
            service.login("testuser", VALID_PASSWORD)

    def test_unverified_user_refused(self, service, user_store) -> None:
        user_store.find_by_username.return_value = make_user()

        with pytest.raises(EmailNotVerified):
            service.login("testuser", VALID_PASSWORD)

    def test_unverified_user_allowed_when_verification_disabled(
        self, service, user_store
    ) -> None:
        service.require_email_verification = False
        user_store.find_by_username.return_value = make_user()

        assert service.login("testuser", VALID_PASSWORD).id == 42

    def test_unverified_user_with_wrong_password_is_invalid_credentials(
        self, service, user_store
    ) -> None:
        """A wrong password never reveals the verification state."""
        user_store.find_by_username.return_value = make_user()

        with pytest.raises(InvalidCredentials):
            service.login("testuser", "Wrong123!")


class TestResendVerification:
    """Tests for resending verification links."""

    def test_unverified_user_gets_new_link(
        self, service, user_store, email_sender, clock
    ) -> None:
        user_store.find_by_email.return_value = make_user()
        service.resend_verification("test@example.com")
        clock.advance(60)
        service.resend_verification("test@example.com")

        urls = [url for _, url in email_sender.verification_links]
        assert len(urls) == 2
        assert urls[0] != urls[1]

    def test_verified_user_gets_nothing(self, service, user_store, email_sender) -> None:
        user_store.find_by_email.return_value = make_user(
            email_verified_at=FIXED_NOW - timedelta(days=1)
        )

        service.resend_verification("test@example.com")

        assert email_sender.verification_links == []

    def test_unknown_email_gets_nothing(self, service, user_store, email_sender) -> None:
        user_store.find_by_email.return_value = None

        service.resend_verification("nobody@example.com")

        assert email_sender.verification_links == []
