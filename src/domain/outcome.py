"""
Outcome model shared by the verification and reset protocols.

Both protocols report every expected result as an Outcome value instead
of raising. Transport adapters reshape an Outcome (see responses.py) and
pick an HTTP status from it; they never need to know which protocol
produced it.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable machine-readable failure codes."""

    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_VERIFICATION_LINK = "INVALID_VERIFICATION_LINK"
    INVALID_RESET_TOKEN = "INVALID_RESET_TOKEN"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    SYSTEM_ERROR = "SYSTEM_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"


class Messages:
    """User-facing messages (Traditional Chinese)."""

    EMAIL_VERIFIED = "電子郵件驗證成功"
    EMAIL_ALREADY_VERIFIED = "電子郵件已經驗證過了"
    VERIFY_USER_NOT_FOUND = "找不到指定的使用者"
    INVALID_VERIFICATION_LINK = "無效或過期的驗證連結"
    PASSWORD_RESET = "密碼重設成功"
    RESET_USER_NOT_FOUND = "找不到該電子郵件的使用者"
    INVALID_RESET_TOKEN = "無效或過期的重設連結"
    RESET_LINK_SENT = "密碼重設連結已發送到您的電子郵件"
    VERIFICATION_LINK_SENT = "驗證郵件已重新發送"
    PASSWORD_CONFIRMATION_MISMATCH = "密碼確認不一致"
    VALIDATION_FAILED = "資料驗證失敗"
    SYSTEM_ERROR = "系統錯誤，請稍後再試"
    REGISTERED_PENDING_VERIFICATION = "註冊成功，請檢查您的電子郵件以完成驗證"
    REGISTERED = "註冊成功"
    REGISTRATION_FAILED = "註冊失敗，使用者名稱或電子郵件已被使用"
    LOGIN_SUCCEEDED = "登入成功"
    INVALID_CREDENTIALS = "使用者名稱或密碼錯誤"
    EMAIL_NOT_VERIFIED = "請先驗證您的電子郵件地址"


@dataclass(frozen=True)
class VerificationCredentials:
    """Parameters carried by an email verification link."""

    user_id: int
    email_hash: str
    expires: int
    signature: str


@dataclass(frozen=True)
class ResetCredentials:
    """Parameters submitted with a password reset form."""

    email: str
    password: str
    password_confirmation: str
    token: str


@dataclass(frozen=True)
class Outcome:
    """
    Canonical success/failure result of a protocol run.

    Invariants (checked at construction):
    - message is never empty
    - error_code is None on success and set on failure
    - failures carry no user snapshot
    """

    success: bool
    message: str
    error_code: ErrorCode | None = None
    user: dict[str, Any] | None = None
    email: str | None = None

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("Outcome message must not be empty")
        if self.success and self.error_code is not None:
            raise ValueError("Successful outcome cannot carry an error code")
        if not self.success and self.error_code is None:
            raise ValueError("Failed outcome requires an error code")
        if not self.success and self.user is not None:
            raise ValueError("Failed outcome cannot carry a user snapshot")

    @classmethod
    def ok(
        cls, message: str, *, user: dict[str, Any] | None = None, email: str | None = None
    ) -> "Outcome":
        return cls(success=True, message=message, user=user, email=email)

    @classmethod
    def fail(cls, error_code: ErrorCode, message: str, *, email: str | None = None) -> "Outcome":
        return cls(success=False, message=message, error_code=error_code, email=email)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "error_code": self.error_code.value if self.error_code else None,
            "user": self.user,
            "email": self.email,
        }


@dataclass(frozen=True)
class EmailVerified:
    """Published once when a user's email first becomes verified."""

    user_id: int
    email: str
    verified_at: datetime


@dataclass(frozen=True)
class PasswordWasReset:
    """Published after a reset token was consumed and the password changed."""

    email: str
    occurred_at: datetime


@dataclass(frozen=True)
class UserRegistered:
    """Published after a new account is created."""

    user_id: int
    email: str
