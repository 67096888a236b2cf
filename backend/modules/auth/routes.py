"""
Auth API endpoints.

Thin mapping from HTTP requests to IAuthService flows. Errors raised by
the service are rendered by the application-wide VellumError handler.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.middleware.auth import get_current_user
from api.dependencies import get_auth_service
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .exceptions import DeliveryFailedError
from .models import (
    AuthResult,
    ForgotPasswordRequest,
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    PublicUser,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenPair,
    VerifyEmailRequest,
    VerifyEmailResponse,
)

router = APIRouter()


@router.post("/register", response_model=AuthResult, status_code=201)
async def register(
    request: RegisterRequest,
    service: IAuthService = Depends(get_auth_service),
):
    """
    Create an account and sign it in.

    If the verification email could not be sent the account still exists;
    the tokens are returned with a 202 and an error code so the client can
    offer a resend.
    """
    try:
        return await service.register(
            request.email, request.password, request.first_name, request.last_name
        )
    except DeliveryFailedError as e:
        if e.result is None:
            raise
        body = e.result.model_dump(mode="json")
        body["error"] = e.code
        return JSONResponse(status_code=202, content=body)


@router.post("/login", response_model=AuthResult)
async def login(
    request: LoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResult:
    """Sign in with email and password."""
    return await service.login(request.email, request.password)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: LogoutRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Revoke the given refresh token. Succeeds even if it was already revoked."""
    await service.logout(request.refresh_token, user_id=user.id)
    return MessageResponse(message="Logout successful")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Request a reset link. The response is the same whether or not the account exists."""
    await service.forgot_password(request.email)
    return MessageResponse(
        message="If an account with that email exists, a password reset link has been sent."
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set a new password using a reset token."""
    await service.reset_password(request.token, request.password)
    return MessageResponse(
        message="Password reset successful. You can now login with your new password."
    )


@router.post("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(
    request: VerifyEmailRequest,
    service: IAuthService = Depends(get_auth_service),
) -> VerifyEmailResponse:
    """Mark the token's user as verified."""
    user = await service.verify_email(request.token)
    return VerifyEmailResponse(user=user)


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Send a fresh verification email to the current user."""
    await service.resend_verification(user.id)
    return MessageResponse(message="Verification email sent successfully")


@router.post("/refresh-token", response_model=TokenPair)
async def refresh_token(
    request: RefreshTokenRequest,
    service: IAuthService = Depends(get_auth_service),
) -> TokenPair:
    """Rotate a refresh token into a new access/refresh pair."""
    return await service.refresh(request.refresh_token)


@router.get("/me", response_model=PublicUser)
async def get_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> PublicUser:
    """Get the current user's profile."""
    return await service.get_profile(user.id)
