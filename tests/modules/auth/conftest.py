"""
Fixtures for auth tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from classhub.modules.auth.models import RefreshToken
from classhub.modules.auth.otp import OtpIssuer
from classhub.modules.auth.service import AuthService
from classhub.modules.auth.tokens import SessionTokenIssuer
from classhub.modules.users.models import User, UserRole


@pytest.fixture
def sample_user():
    """An active, verified student (transient, not persisted)."""
    now = datetime.now(UTC)
    return User(
        id=1,
        email="learner@example.com",
        full_name="Learner One",
        password_hash="stored-hash",
        role=UserRole.STUDENT,
        is_active=True,
        is_verified=True,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def mock_otp():
    otp = MagicMock(spec=OtpIssuer)
    otp.issue = AsyncMock(return_value="123456")
    otp.verify = AsyncMock()
    otp.consume = AsyncMock(return_value=1)
    return otp


@pytest.fixture
def mock_tokens():
    tokens = MagicMock(spec=SessionTokenIssuer)
    tokens.access_token_expires_in = 900
    tokens.issue_access_token = MagicMock(return_value="access-token")
    tokens.issue_refresh_token = AsyncMock(return_value="new-refresh-token")
    tokens.verify_refresh_token = AsyncMock()
    tokens.revoke = AsyncMock(return_value=1)
    tokens.revoke_all_for_user = AsyncMock(return_value=2)
    return tokens


@pytest.fixture
def auth_service(settings, mock_otp, mock_tokens):
    return AuthService(settings, otp_issuer=mock_otp, token_issuer=mock_tokens)


@pytest.fixture
def sample_refresh_record():
    record = MagicMock(spec=RefreshToken)
    record.user_id = 1
    return record
