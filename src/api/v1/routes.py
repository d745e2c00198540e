"""
API v1 routes.

Defines the JSON authentication endpoints under /v1/auth:
- POST /register, /login
- POST /verify-email, /resend-verification
- POST /forgot-password, /reset-password
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import (
    get_link_verifier,
    get_password_reset_protocol,
    get_registration_service,
)
from src.api.models import (
    ApiErrorResponse,
    ApiSuccessResponse,
    EmailRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from src.api.responses import error_response, status_code_for
from src.domain.exceptions import EmailAlreadyRegistered, EmailNotVerified, InvalidCredentials
from src.domain.outcome import (
    ErrorCode,
    Messages,
    ResetCredentials,
    VerificationCredentials,
)
from src.domain.password_reset import PasswordResetProtocol
from src.domain.registration import RegistrationService
from src.domain.responses import to_api_shape
from src.domain.verification import SignedLinkVerifier

router = APIRouter(prefix="/auth", tags=["v1"])


@router.post(
    "/register",
    response_model=ApiSuccessResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ApiErrorResponse, "description": "Username or email already registered"},
        422: {"model": ApiErrorResponse, "description": "Validation error"},
    },
    summary="Register a new user",
    description="Create an account. Unless email verification is disabled, "
    "a signed verification link is sent to the provided email.",
)
async def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> JSONResponse:
    """
    Register a new user and send a verification link.

    - **username**: Unique login name
    - **email**: Valid email address
    - **password** / **password_confirmation**: Password meeting the policy
    """
    try:
        user = service.register(
            request_data.username,
            request_data.email,
            request_data.password,
            name=request_data.name,
        )
    except EmailAlreadyRegistered:
        return error_response(
            status.HTTP_409_CONFLICT,
            ErrorCode.EMAIL_ALREADY_REGISTERED,
            Messages.REGISTRATION_FAILED,
        )

    verification_required = service.require_email_verification
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "status": "success",
            "message": (
                Messages.REGISTERED_PENDING_VERIFICATION
                if verification_required
                else Messages.REGISTERED
            ),
            "data": {
                "user": user.snapshot(),
                "email_verification_required": verification_required,
            },
        },
    )


@router.post(
    "/login",
    response_model=ApiSuccessResponse,
    responses={
        401: {"model": ApiErrorResponse, "description": "Invalid credentials"},
        403: {"model": ApiErrorResponse, "description": "Email not verified"},
    },
    summary="Log in with username or email",
)
async def login(
    request_data: LoginRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> JSONResponse:
    """
    Authenticate a regular user.

    All credential failures share one generic message so the response does
    not reveal whether the account exists.
    """
    try:
        user = service.login(request_data.username, request_data.password)
    except InvalidCredentials:
        return error_response(
            status.HTTP_401_UNAUTHORIZED,
            ErrorCode.INVALID_CREDENTIALS,
            Messages.INVALID_CREDENTIALS,
        )
    except EmailNotVerified:
        return error_response(
            status.HTTP_403_FORBIDDEN,
            ErrorCode.EMAIL_NOT_VERIFIED,
            Messages.EMAIL_NOT_VERIFIED,
        )

    return JSONResponse(
        content={
            "status": "success",
            "message": Messages.LOGIN_SUCCEEDED,
            "data": {"user": user.snapshot()},
        }
    )


@router.post(
    "/verify-email",
    response_model=ApiSuccessResponse,
    responses={
        400: {"model": ApiErrorResponse, "description": "Invalid or expired link"},
        404: {"model": ApiErrorResponse, "description": "User not found"},
    },
    summary="Verify an email address",
    description="Submit the id, hash, expires and signature parameters of a "
    "verification link.",
)
async def verify_email(
    request_data: VerifyEmailRequest,
    verifier: SignedLinkVerifier = Depends(get_link_verifier),
) -> JSONResponse:
    """Verify the signed link parameters and mark the email verified."""
    outcome = verifier.verify(
        VerificationCredentials(
            user_id=request_data.id,
            email_hash=request_data.hash,
            expires=request_data.expires,
            signature=request_data.signature,
        )
    )
    return JSONResponse(status_code=status_code_for(outcome), content=to_api_shape(outcome))


@router.post(
    "/resend-verification",
    response_model=ApiSuccessResponse,
    summary="Resend the verification link",
)
async def resend_verification(
    request_data: EmailRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> JSONResponse:
    """Always succeeds; a link is only sent to unverified accounts."""
    service.resend_verification(request_data.email)
    return JSONResponse(
        content={
            "status": "success",
            "message": Messages.VERIFICATION_LINK_SENT,
            "data": {"email": request_data.email},
        }
    )


@router.post(
    "/forgot-password",
    response_model=ApiSuccessResponse,
    summary="Request a password reset link",
)
async def forgot_password(
    request_data: EmailRequest,
    protocol: PasswordResetProtocol = Depends(get_password_reset_protocol),
) -> JSONResponse:
    """Always succeeds so the endpoint cannot be used to probe for accounts."""
    outcome = protocol.request_reset(request_data.email)
    return JSONResponse(content=to_api_shape(outcome))


@router.post(
    "/reset-password",
    response_model=ApiSuccessResponse,
    responses={
        400: {"model": ApiErrorResponse, "description": "Invalid token or unknown email"},
        422: {"model": ApiErrorResponse, "description": "Validation error"},
    },
    summary="Reset password with a reset token",
)
async def reset_password(
    request_data: ResetPasswordRequest,
    protocol: PasswordResetProtocol = Depends(get_password_reset_protocol),
) -> JSONResponse:
    """Consume the reset token and set the new password."""
    outcome = protocol.reset_password(
        ResetCredentials(
            email=request_data.email,
            password=request_data.password,
            password_confirmation=request_data.password_confirmation,
            token=request_data.token,
        )
    )
    return JSONResponse(
        status_code=status_code_for(outcome, not_found_status=status.HTTP_400_BAD_REQUEST),
        content=to_api_shape(outcome),
    )
