"""
Auth Service Layer

Orchestrates the credential store, the one-time-code issuer and the session
token issuer into the account flows:

1. Registration: create an inactive user, email a verification code
2. Email verification: accept the code, activate the user, consume the code
3. Login: check credentials, issue an access token and a refresh token
4. Refresh: rotate the refresh token, issue a new access token
5. Logout: revoke a refresh token
6. Password reset: email a reset code, accept it, replace the password hash

Each flow commits once at the end, so a failure part-way leaves no partial
state behind. Emails are sent after the commit; a delivery failure is logged
and the persisted code stays valid.

Security considerations:
- Login failures use a single error for unknown email, inactive account and
  wrong password; a dummy bcrypt compare keeps timing uniform
- Resend and forgot-password respond identically whether or not the account
  exists
- Refresh tokens are stored hashed; rotation detects concurrent reuse through
  the delete row count
- Codes and tokens are never logged
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.config import Settings
from classhub.core.email import send_password_reset_code, send_verification_code
from classhub.core.exceptions import ConflictError, UnauthorizedError, UnprocessableError
from classhub.core.security import hash_password_async, verify_password_async
from classhub.modules.auth.models import OtpPurpose
from classhub.modules.auth.otp import OtpIssuer
from classhub.modules.auth.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from classhub.modules.auth.tokens import SessionTokenIssuer
from classhub.modules.users.models import User, UserRole
from classhub.modules.users.repository import UserRepository
from classhub.modules.users.schemas import UserResponse
from classhub.modules.users.service import PhoneNumberExistsError

logger = logging.getLogger(__name__)


class EmailAlreadyExistsError(ConflictError):
    """Raised when registering an email that is already taken."""

    def __init__(self):
        super().__init__(
            message="An account with this email already exists.",
            error_code="EMAIL_ALREADY_EXISTS",
        )


class InvalidCredentialsError(UnprocessableError):
    """Raised on any login failure. Deliberately vague."""

    def __init__(self):
        super().__init__(
            message="Invalid email or password.",
            error_code="INVALID_CREDENTIALS",
        )


class InvalidOtpError(UnprocessableError):
    """Raised when a one-time code is wrong or expired."""

    def __init__(self):
        super().__init__(
            message="The code is invalid or has expired.",
            error_code="INVALID_OTP",
        )


class InvalidRefreshTokenError(UnauthorizedError):
    """Raised when a refresh token is unknown, expired or already rotated."""

    def __init__(self):
        super().__init__(
            message="Refresh token is invalid or expired. Please log in again.",
            error_code="INVALID_REFRESH_TOKEN",
        )


def normalize_email(email: str) -> str:
    """Emails are stored and compared in lower case."""
    return email.strip().lower()


class AuthService:
    """Account lifecycle flows."""

    def __init__(
        self,
        settings: Settings,
        otp_issuer: OtpIssuer | None = None,
        token_issuer: SessionTokenIssuer | None = None,
    ):
        self._settings = settings
        self.otp = otp_issuer or OtpIssuer(settings)
        self.tokens = token_issuer or SessionTokenIssuer(settings)

    async def register(self, db: AsyncSession, data: RegisterRequest) -> User:
        """
        Register a new student account.

        The user is created inactive and unverified, and a verification code
        is emailed.

        Raises:
            EmailAlreadyExistsError: If the email is already registered
            PhoneNumberExistsError: If the phone number belongs to another account
        """
        email = normalize_email(data.email)
        password_hash = await hash_password_async(data.password)

        try:
            user = await UserRepository.create(
                db,
                email=email,
                password_hash=password_hash,
                full_name=data.full_name.strip(),
                phone_number=data.phone_number,
                role=UserRole.STUDENT,
                is_active=False,
                is_verified=False,
            )
        except IntegrityError as e:
            await db.rollback()
            # email and phone_number are the unique columns
            if data.phone_number and await UserRepository.get_by_email(db, email) is None:
                logger.warning(f"Registration rejected, phone number already in use: {email}")
                raise PhoneNumberExistsError() from e
            logger.warning(f"Registration rejected, email already exists: {email}")
            raise EmailAlreadyExistsError() from e

        code = await self.otp.issue(db, email, OtpPurpose.EMAIL_VERIFICATION)
        await db.commit()

        logger.info(f"User registered: {user.id} - {email}")
        await self._deliver(send_verification_code, email, code)
        return user

    async def send_verification_code(self, db: AsyncSession, email: str) -> None:
        """Re-issue a verification code for an unverified account."""
        email = normalize_email(email)
        user = await UserRepository.get_by_email(db, email)

        if user is None or user.is_verified:
            logger.info(f"Verification code not sent, no unverified account for {email}")
            return

        code = await self.otp.issue(db, email, OtpPurpose.EMAIL_VERIFICATION)
        await db.commit()
        await self._deliver(send_verification_code, email, code)

    async def verify_email(self, db: AsyncSession, email: str, code: str) -> User:
        """
        Accept a verification code and activate the account.

        Raises:
            InvalidOtpError: If the code is wrong, expired or has no account
        """
        email = normalize_email(email)
        otp = await self.otp.verify(db, email, code, OtpPurpose.EMAIL_VERIFICATION)
        if otp is None:
            logger.warning(f"Invalid verification code submitted for {email}")
            raise InvalidOtpError()

        user = await UserRepository.get_by_email(db, email)
        if user is None:
            raise InvalidOtpError()

        await UserRepository.update(db, user, is_active=True, is_verified=True)
        await self.otp.consume(db, email, OtpPurpose.EMAIL_VERIFICATION)
        await db.commit()

        logger.info(f"Email verified, user activated: {user.id} - {email}")
        return user

    async def login(self, db: AsyncSession, credentials: LoginRequest) -> LoginResponse:
        """
        Authenticate a user and open a session.

        Raises:
            InvalidCredentialsError: Unknown email, inactive account or wrong password
        """
        email = normalize_email(credentials.email)
        user = await UserRepository.get_by_email(db, email)

        password_ok = await verify_password_async(
            credentials.password,
            user.password_hash if user else None,
        )

        if user is None or not password_ok:
            logger.warning(f"Failed login for {email}")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Login attempt for inactive account: {email}")
            raise InvalidCredentialsError()

        tokens = await self._open_session(db, user)
        await db.commit()

        logger.info(f"User logged in: {user.email} (role: {user.role.value})")
        return LoginResponse(
            **tokens.model_dump(),
            user=UserResponse.model_validate(user),
        )

    async def refresh(self, db: AsyncSession, refresh_token: str) -> TokenResponse:
        """
        Rotate a refresh token.

        The presented token is revoked and a new pair is issued in the same
        transaction. If another request rotated the token first the delete
        affects no row and this call fails.

        Raises:
            InvalidRefreshTokenError: Token unknown, expired, already rotated,
                or its owner is no longer active
        """
        record = await self.tokens.verify_refresh_token(db, refresh_token)
        if record is None:
            raise InvalidRefreshTokenError()

        user = await UserRepository.get_by_id(db, record.user_id)
        if user is None or not user.is_active:
            logger.warning(f"Refresh rejected for inactive or missing user {record.user_id}")
            raise InvalidRefreshTokenError()

        revoked = await self.tokens.revoke(db, refresh_token)
        if revoked == 0:
            logger.warning(f"Refresh token for user {user.id} was rotated concurrently")
            raise InvalidRefreshTokenError()

        tokens = await self._open_session(db, user)
        await db.commit()

        logger.info(f"Session refreshed for user {user.id}")
        return tokens

    async def logout(self, db: AsyncSession, refresh_token: str) -> None:
        """Revoke a refresh token. Unknown tokens are ignored."""
        revoked = await self.tokens.revoke(db, refresh_token)
        await db.commit()
        logger.info(f"Logout revoked {revoked} session(s)")

    async def forgot_password(self, db: AsyncSession, email: str) -> None:
        """Email a password reset code if an active account exists."""
        email = normalize_email(email)
        user = await UserRepository.get_by_email(db, email)

        if user is None or not user.is_active:
            logger.info(f"Password reset requested for unknown or inactive account: {email}")
            return

        code = await self.otp.issue(db, email, OtpPurpose.PASSWORD_RESET)
        await db.commit()
        await self._deliver(send_password_reset_code, email, code)

    async def reset_password(self, db: AsyncSession, data: ResetPasswordRequest) -> None:
        """
        Replace the password using a reset code.

        Every refresh token of the user is revoked.

        Raises:
            InvalidOtpError: If the code is wrong or expired
        """
        email = normalize_email(data.email)
        otp = await self.otp.verify(db, email, data.code, OtpPurpose.PASSWORD_RESET)
        if otp is None:
            logger.warning(f"Invalid password reset code submitted for {email}")
            raise InvalidOtpError()

        user = await UserRepository.get_by_email(db, email)
        if user is None:
            raise InvalidOtpError()

        password_hash = await hash_password_async(data.new_password)
        await UserRepository.update(db, user, password_hash=password_hash)
        await self.otp.consume(db, email, OtpPurpose.PASSWORD_RESET)
        revoked = await self.tokens.revoke_all_for_user(db, user.id)
        await db.commit()

        logger.info(f"Password reset for user {user.id} ({revoked} sessions revoked)")

    async def _open_session(self, db: AsyncSession, user: User) -> TokenResponse:
        refresh_token = await self.tokens.issue_refresh_token(db, user.id)
        access_token = self.tokens.issue_access_token(user.id, user.role)
        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.tokens.access_token_expires_in,
        )

    async def _deliver(self, sender, email: str, code: str) -> None:
        sent = await sender(email, code, self._settings.otp_expire_minutes)
        if not sent:
            logger.error(f"Failed to deliver code email to {email}; code remains valid")
