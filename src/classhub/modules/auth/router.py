"""
Authentication Router

Public endpoints for the account lifecycle. All are rate-limited per client
IP and path.

Endpoints:
- POST /auth/register - Create an account and email a verification code
- POST /auth/send-verification-code - Resend the verification code
- POST /auth/verify-email - Activate the account with the code
- POST /auth/login - Exchange credentials for tokens
- POST /auth/refresh-token - Rotate the refresh token
- POST /auth/logout - Revoke a refresh token
- POST /auth/forgot-password - Email a password reset code
- PUT  /auth/reset-password - Set a new password with the reset code
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.config import Settings, get_settings
from classhub.core.database import get_db
from classhub.core.rate_limit import rate_limit
from classhub.modules.auth.schemas import (
    EmailRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    VerifyEmailRequest,
)
from classhub.modules.auth.service import AuthService
from classhub.modules.shared import MessageResponse
from classhub.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Generic acknowledgement for flows that must not reveal whether an account exists
CODE_SENT_MESSAGE = "If an account matches this email, a code has been sent."


def get_auth_service(settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(settings)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
)
@rate_limit(limit=3, window_seconds=600)
async def register(
    request: Request,
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """
    Register a new student account.

    The account stays inactive until the emailed verification code is
    submitted to /verify-email.
    """
    user = await auth.register(db, data)
    return UserResponse.model_validate(user)


@router.post("/send-verification-code", response_model=MessageResponse)
@rate_limit(limit=3, window_seconds=60)
async def send_verification_code(
    request: Request,
    data: EmailRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Resend the email verification code."""
    await auth.send_verification_code(db, data.email)
    return MessageResponse(message=CODE_SENT_MESSAGE)


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    responses={422: {"description": "Invalid or expired code"}},
)
@rate_limit(limit=10, window_seconds=300)
async def verify_email(
    request: Request,
    data: VerifyEmailRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Verify the email address and activate the account."""
    await auth.verify_email(db, data.email, data.code)
    return MessageResponse(message="Email verified successfully. You can now log in.")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={422: {"description": "Invalid credentials"}},
)
@rate_limit(limit=5, window_seconds=300)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Authenticate user and return tokens.

    Returns:
        Access token, refresh token, and user info
    """
    return await auth.login(db, credentials)


@router.post(
    "/refresh-token",
    response_model=TokenResponse,
    responses={401: {"description": "Refresh token invalid or expired"}},
)
async def refresh_token(
    data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Rotate the refresh token and issue a new access token."""
    return await auth.refresh(db, data.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Revoke the refresh token."""
    await auth.logout(db, data.refresh_token)
    return MessageResponse(message="Logged out successfully.")


@router.post("/forgot-password", response_model=MessageResponse)
@rate_limit(limit=3, window_seconds=60)
async def forgot_password(
    request: Request,
    data: EmailRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Email a password reset code."""
    await auth.forgot_password(db, data.email)
    return MessageResponse(message=CODE_SENT_MESSAGE)


@router.put(
    "/reset-password",
    response_model=MessageResponse,
    responses={422: {"description": "Invalid or expired code"}},
)
@rate_limit(limit=5, window_seconds=300)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Set a new password using the emailed reset code."""
    await auth.reset_password(db, data)
    return MessageResponse(message="Password has been reset. Please log in again.")
