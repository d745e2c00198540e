"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Password policy and confirmation are enforced here, before any domain
service runs.
"""

from typing import Any

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from src.domain.password_policy import password_policy_errors


def _check_policy(value: str) -> str:
    errors = password_policy_errors(value)
    if errors:
        raise ValueError("; ".join(errors))
    return value


def _check_confirmation(value: str, info: ValidationInfo) -> str:
    if "password" in info.data and value != info.data["password"]:
        raise ValueError("密碼確認不一致")
    return value


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=255,
        pattern=r"^[a-zA-Z0-9_.-]+$",
        description="Letters, digits, underscore, dot and dash only",
    )
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password meeting the password policy")
    password_confirmation: str
    name: str | None = Field(None, max_length=255)

    @field_validator("password")
    @classmethod
    def password_meets_policy(cls, value: str) -> str:
        return _check_policy(value)

    @field_validator("password_confirmation")
    @classmethod
    def confirmation_matches(cls, value: str, info: ValidationInfo) -> str:
        return _check_confirmation(value, info)


class LoginRequest(BaseModel):
    """Request model for login by username or email."""

    username: str = Field(..., min_length=1, max_length=255, description="Username or email")
    password: str = Field(..., min_length=1)


class VerifyEmailRequest(BaseModel):
    """Request model carrying the parameters of a verification link."""

    id: int = Field(..., gt=0, description="User id from the link")
    hash: str = Field(..., min_length=1, description="SHA-1 hash of the email")
    expires: int = Field(..., description="Unix expiry timestamp")
    signature: str = Field(..., min_length=1, description="Link signature")


class EmailRequest(BaseModel):
    """Request model for endpoints that only take an email address."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request model for completing a password reset."""

    token: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8, description="New password meeting the password policy")
    password_confirmation: str

    @field_validator("password")
    @classmethod
    def password_meets_policy(cls, value: str) -> str:
        return _check_policy(value)

    @field_validator("password_confirmation")
    @classmethod
    def confirmation_matches(cls, value: str, info: ValidationInfo) -> str:
        return _check_confirmation(value, info)


class ApiSuccessResponse(BaseModel):
    """Successful API response envelope."""

    status: str = "success"
    message: str
    data: dict[str, Any] = {}


class ApiErrorResponse(BaseModel):
    """Failed API response envelope."""

    status: str = "error"
    message: str
    error_code: str | None = None
    errors: dict[str, list[str]] | None = None


class WebResponse(BaseModel):
    """Response shape used by the link-click and form endpoints."""

    success: bool
    message: str
    error_code: str | None = None
    user: dict[str, Any] | None = None
    email: str | None = None
    redirect_url: str | None = None
    errors: list[str] | None = None
