"""
Unit tests for the auth service flows.

These tests cover:
- Registration (success, duplicate email or phone number)
- Resend and email verification
- Login (success and the three failure modes)
- Refresh token rotation, including concurrent rotation
- Logout
- Forgot / reset password
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from classhub.modules.auth.models import OtpPurpose
from classhub.modules.auth.schemas import LoginRequest, RegisterRequest, ResetPasswordRequest
from classhub.modules.auth.service import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    InvalidOtpError,
    InvalidRefreshTokenError,
    normalize_email,
)
from classhub.modules.users.models import UserRole
from classhub.modules.users.service import PhoneNumberExistsError

SERVICE = "classhub.modules.auth.service"


def _register_request(**overrides) -> RegisterRequest:
    data = {
        "email": "Learner@Example.com",
        "full_name": "Learner One",
        "password": "Password@123",
        "confirm_password": "Password@123",
    }
    data.update(overrides)
    return RegisterRequest(**data)


class TestNormalizeEmail:
    def test_lowercases_and_strips(self):
        assert normalize_email("  Learner@Example.COM ") == "learner@example.com"


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_creates_inactive_student_and_sends_code(
        self, mock_db, auth_service, mock_otp, sample_user
    ):
        sample_user.is_active = False
        sample_user.is_verified = False
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.hash_password_async", AsyncMock(return_value="hashed")),
            patch(f"{SERVICE}.send_verification_code", AsyncMock(return_value=True)) as mock_email,
        ):
            mock_repo.create = AsyncMock(return_value=sample_user)

            user = await auth_service.register(mock_db, _register_request())

            assert user is sample_user
            kwargs = mock_repo.create.call_args.kwargs
            assert kwargs["email"] == "learner@example.com"
            assert kwargs["password_hash"] == "hashed"
            assert kwargs["role"] == UserRole.STUDENT
            assert kwargs["is_active"] is False
            mock_otp.issue.assert_awaited_once_with(
                mock_db, "learner@example.com", OtpPurpose.EMAIL_VERIFICATION
            )
            mock_db.commit.assert_awaited_once()
            mock_email.assert_awaited_once()
            assert mock_email.call_args.args[:2] == ("learner@example.com", "123456")

    @pytest.mark.asyncio
    async def test_duplicate_email_raises_conflict(self, mock_db, auth_service, mock_otp):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.hash_password_async", AsyncMock(return_value="hashed")),
            patch(f"{SERVICE}.send_verification_code", AsyncMock()) as mock_email,
        ):
            mock_repo.create = AsyncMock(
                side_effect=IntegrityError("INSERT INTO users", {}, Exception("duplicate"))
            )

            with pytest.raises(EmailAlreadyExistsError) as exc_info:
                await auth_service.register(mock_db, _register_request())

            assert exc_info.value.status_code == 409
            assert exc_info.value.error_code == "EMAIL_ALREADY_EXISTS"
            mock_db.rollback.assert_awaited_once()
            mock_db.commit.assert_not_awaited()
            mock_otp.issue.assert_not_awaited()
            mock_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_phone_number_raises_conflict(self, mock_db, auth_service, mock_otp):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.hash_password_async", AsyncMock(return_value="hashed")),
        ):
            mock_repo.create = AsyncMock(
                side_effect=IntegrityError("INSERT INTO users", {}, Exception("duplicate"))
            )
            mock_repo.get_by_email = AsyncMock(return_value=None)

            with pytest.raises(PhoneNumberExistsError) as exc_info:
                await auth_service.register(
                    mock_db, _register_request(phone_number="0712345678")
                )

            assert exc_info.value.status_code == 409
            assert exc_info.value.error_code == "PHONE_NUMBER_EXISTS"
            mock_repo.get_by_email.assert_awaited_once_with(mock_db, "learner@example.com")
            mock_db.rollback.assert_awaited_once()
            mock_otp.issue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_email_conflict_wins_over_phone_conflict(
        self, mock_db, auth_service, mock_otp, sample_user
    ):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.hash_password_async", AsyncMock(return_value="hashed")),
            patch(f"{SERVICE}.send_verification_code", AsyncMock()) as mock_email,
        ):
            mock_repo.create = AsyncMock(
                side_effect=IntegrityError("INSERT INTO users", {}, Exception("duplicate"))
            )
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)

            with pytest.raises(EmailAlreadyExistsError):
                await auth_service.register(
                    mock_db, _register_request(phone_number="0712345678")
                )
            mock_otp.issue.assert_not_awaited()
            mock_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_registration(
        self, mock_db, auth_service, sample_user
    ):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.hash_password_async", AsyncMock(return_value="hashed")),
            patch(f"{SERVICE}.send_verification_code", AsyncMock(return_value=False)),
        ):
            mock_repo.create = AsyncMock(return_value=sample_user)

            user = await auth_service.register(mock_db, _register_request())

            assert user is sample_user
            mock_db.commit.assert_awaited_once()


class TestSendVerificationCode:
    @pytest.mark.asyncio
    async def test_unknown_email_is_silent(self, mock_db, auth_service, mock_otp):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.send_verification_code", AsyncMock()) as mock_email,
        ):
            mock_repo.get_by_email = AsyncMock(return_value=None)

            await auth_service.send_verification_code(mock_db, "nobody@example.com")

            mock_otp.issue.assert_not_awaited()
            mock_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verified_account_is_silent(self, mock_db, auth_service, mock_otp, sample_user):
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)

            await auth_service.send_verification_code(mock_db, sample_user.email)

            mock_otp.issue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unverified_account_gets_new_code(
        self, mock_db, auth_service, mock_otp, sample_user
    ):
        sample_user.is_verified = False
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.send_verification_code", AsyncMock(return_value=True)) as mock_email,
        ):
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)

            await auth_service.send_verification_code(mock_db, sample_user.email)

            mock_otp.issue.assert_awaited_once()
            mock_email.assert_awaited_once()


class TestVerifyEmail:
    @pytest.mark.asyncio
    async def test_valid_code_activates_and_consumes(
        self, mock_db, auth_service, mock_otp, sample_user
    ):
        sample_user.is_active = False
        sample_user.is_verified = False
        mock_otp.verify.return_value = object()
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)
            mock_repo.update = AsyncMock(return_value=sample_user)

            await auth_service.verify_email(mock_db, sample_user.email, "123456")

            mock_repo.update.assert_awaited_once_with(
                mock_db, sample_user, is_active=True, is_verified=True
            )
            mock_otp.consume.assert_awaited_once_with(
                mock_db, sample_user.email, OtpPurpose.EMAIL_VERIFICATION
            )
            mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_code_raises(self, mock_db, auth_service, mock_otp):
        mock_otp.verify.return_value = None
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.update = AsyncMock()

            with pytest.raises(InvalidOtpError) as exc_info:
                await auth_service.verify_email(mock_db, "learner@example.com", "000000")

            assert exc_info.value.status_code == 422
            mock_repo.update.assert_not_awaited()
            mock_otp.consume.assert_not_awaited()
            mock_db.commit.assert_not_awaited()


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success_issues_both_tokens(
        self, mock_db, auth_service, mock_tokens, sample_user
    ):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password_async", AsyncMock(return_value=True)),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)

            result = await auth_service.login(
                mock_db, LoginRequest(email=sample_user.email, password="Password@123")
            )

            assert result.access_token == "access-token"
            assert result.refresh_token == "new-refresh-token"
            assert result.token_type == "bearer"
            assert result.user.id == sample_user.id
            mock_tokens.issue_refresh_token.assert_awaited_once_with(mock_db, sample_user.id)
            mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db, auth_service, mock_tokens, sample_user):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password_async", AsyncMock(return_value=False)),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)

            with pytest.raises(InvalidCredentialsError) as exc_info:
                await auth_service.login(
                    mock_db, LoginRequest(email=sample_user.email, password="wrong")
                )

            assert exc_info.value.status_code == 422
            mock_tokens.issue_refresh_token.assert_not_awaited()
            mock_tokens.issue_access_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_email_still_compares_password(self, mock_db, auth_service):
        verify = AsyncMock(return_value=False)
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password_async", verify),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=None)

            with pytest.raises(InvalidCredentialsError):
                await auth_service.login(
                    mock_db, LoginRequest(email="nobody@example.com", password="Password@123")
                )

            verify.assert_awaited_once_with("Password@123", None)

    @pytest.mark.asyncio
    async def test_inactive_account(self, mock_db, auth_service, mock_tokens, sample_user):
        sample_user.is_active = False
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password_async", AsyncMock(return_value=True)),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)

            with pytest.raises(InvalidCredentialsError):
                await auth_service.login(
                    mock_db, LoginRequest(email=sample_user.email, password="Password@123")
                )

            mock_tokens.issue_refresh_token.assert_not_awaited()


class TestRefresh:
    @pytest.mark.asyncio
    async def test_rotation_revokes_old_and_issues_new(
        self, mock_db, auth_service, mock_tokens, sample_user, sample_refresh_record
    ):
        mock_tokens.verify_refresh_token.return_value = sample_refresh_record
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)

            result = await auth_service.refresh(mock_db, "old-refresh-token")

            mock_tokens.revoke.assert_awaited_once_with(mock_db, "old-refresh-token")
            assert result.refresh_token == "new-refresh-token"
            assert result.access_token == "access-token"
            mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_token(self, mock_db, auth_service, mock_tokens):
        mock_tokens.verify_refresh_token.return_value = None

        with pytest.raises(InvalidRefreshTokenError) as exc_info:
            await auth_service.refresh(mock_db, "bogus")

        assert exc_info.value.status_code == 401
        mock_tokens.issue_refresh_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inactive_owner(
        self, mock_db, auth_service, mock_tokens, sample_user, sample_refresh_record
    ):
        sample_user.is_active = False
        mock_tokens.verify_refresh_token.return_value = sample_refresh_record
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)

            with pytest.raises(InvalidRefreshTokenError):
                await auth_service.refresh(mock_db, "old-refresh-token")

            mock_tokens.revoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_rotation_is_rejected(
        self, mock_db, auth_service, mock_tokens, sample_user, sample_refresh_record
    ):
        mock_tokens.verify_refresh_token.return_value = sample_refresh_record
        mock_tokens.revoke.return_value = 0
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_user)

            with pytest.raises(InvalidRefreshTokenError):
                await auth_service.refresh(mock_db, "old-refresh-token")

            mock_tokens.issue_refresh_token.assert_not_awaited()
            mock_db.commit.assert_not_awaited()


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_unknown_token_is_fine(self, mock_db, auth_service, mock_tokens):
        mock_tokens.revoke.return_value = 0

        await auth_service.logout(mock_db, "unknown")

        mock_tokens.revoke.assert_awaited_once_with(mock_db, "unknown")
        mock_db.commit.assert_awaited_once()


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_forgot_password_unknown_email_is_silent(self, mock_db, auth_service, mock_otp):
        with patch(f"{SERVICE}.UserRepository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=None)

            await auth_service.forgot_password(mock_db, "nobody@example.com")

            mock_otp.issue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_forgot_password_sends_reset_code(
        self, mock_db, auth_service, mock_otp, sample_user
    ):
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.send_password_reset_code", AsyncMock(return_value=True)) as mock_email,
        ):
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)

            await auth_service.forgot_password(mock_db, sample_user.email)

            mock_otp.issue.assert_awaited_once_with(
                mock_db, sample_user.email, OtpPurpose.PASSWORD_RESET
            )
            mock_email.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reset_password_replaces_hash_and_revokes_sessions(
        self, mock_db, auth_service, mock_otp, mock_tokens, sample_user
    ):
        mock_otp.verify.return_value = object()
        request = ResetPasswordRequest(
            email=sample_user.email,
            code="123456",
            new_password="NewPassword@1",
            confirm_new_password="NewPassword@1",
        )
        with (
            patch(f"{SERVICE}.UserRepository") as mock_repo,
            patch(f"{SERVICE}.hash_password_async", AsyncMock(return_value="new-hash")),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)
            mock_repo.update = AsyncMock(return_value=sample_user)

            await auth_service.reset_password(mock_db, request)

            mock_repo.update.assert_awaited_once_with(mock_db, sample_user, password_hash="new-hash")
            mock_otp.consume.assert_awaited_once_with(
                mock_db, sample_user.email, OtpPurpose.PASSWORD_RESET
            )
            mock_tokens.revoke_all_for_user.assert_awaited_once_with(mock_db, sample_user.id)
            mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reset_password_invalid_code(self, mock_db, auth_service, mock_otp, mock_tokens):
        mock_otp.verify.return_value = None
        request = ResetPasswordRequest(
            email="learner@example.com",
            code="000000",
            new_password="NewPassword@1",
            confirm_new_password="NewPassword@1",
        )

        with pytest.raises(InvalidOtpError):
            await auth_service.reset_password(mock_db, request)

        mock_tokens.revoke_all_for_user.assert_not_awaited()
        mock_db.commit.assert_not_awaited()
