"""
Web routes.

Endpoints reached from emailed links and browser forms. They run the
same protocols as the v1 API but render the web response shape.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from src.api.dependencies import get_link_verifier, get_password_reset_protocol
from src.api.models import ResetPasswordRequest, WebResponse
from src.api.responses import status_code_for
from src.config.settings import get_settings
from src.domain.outcome import ResetCredentials, VerificationCredentials
from src.domain.password_reset import PasswordResetProtocol
from src.domain.responses import to_web_shape
from src.domain.verification import SignedLinkVerifier

router = APIRouter(tags=["web"])


@router.get(
    "/email/verify/{id}/{hash}",
    response_model=WebResponse,
    summary="Verify email from link",
    description="Target of the signed link sent after registration.",
)
async def verify_email_link(
    id: int,
    hash: str,
    expires: int = Query(...),
    signature: str = Query(..., min_length=1),
    verifier: SignedLinkVerifier = Depends(get_link_verifier),
) -> JSONResponse:
    """Verify the clicked link and report the result."""
    outcome = verifier.verify(
        VerificationCredentials(user_id=id, email_hash=hash, expires=expires, signature=signature)
    )
    return JSONResponse(status_code=status_code_for(outcome), content=to_web_shape(outcome))


@router.post(
    "/password/reset",
    response_model=WebResponse,
    summary="Reset password from the web form",
)
async def reset_password_form(
    request_data: ResetPasswordRequest,
    protocol: PasswordResetProtocol = Depends(get_password_reset_protocol),
) -> JSONResponse:
    """Reset the password; on success the client is sent to the login page."""
    outcome = protocol.reset_password(
        ResetCredentials(
            email=request_data.email,
            password=request_data.password,
            password_confirmation=request_data.password_confirmation,
            token=request_data.token,
        )
    )
    redirect_url = get_settings().password_reset_redirect_url if outcome.success else None
    content = to_web_shape(outcome, redirect_url=redirect_url)
    if outcome.success:
        # Form confirmations end with a full-width exclamation mark
        content["message"] = f"{outcome.message}！"
    return JSONResponse(
        status_code=status_code_for(outcome, not_found_status=400),
        content=content,
    )
