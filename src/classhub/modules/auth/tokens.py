"""
Session Token Issuer

Short-lived signed access tokens (stateless JWT) and long-lived opaque refresh
tokens persisted as SHA-256 digests.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.config import Settings
from classhub.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    generate_refresh_token,
    hash_token,
)
from classhub.modules.auth import repository
from classhub.modules.auth.models import RefreshToken
from classhub.modules.shared import utcnow
from classhub.modules.users.models import UserRole

logger = logging.getLogger(__name__)


class SessionTokenIssuer:
    """Issue and validate access and refresh tokens."""

    def __init__(self, settings: Settings, clock: Callable[[], datetime] = utcnow):
        self._secret = settings.access_token_secret
        self._algorithm = settings.access_token_algorithm
        self._access_expire_minutes = settings.access_token_expire_minutes
        self._refresh_expire_days = settings.refresh_token_expire_days
        self._clock = clock

    @property
    def access_token_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self._access_expire_minutes * 60

    def issue_access_token(self, user_id: int, role: UserRole) -> str:
        return create_access_token(
            subject=str(user_id),
            secret=self._secret,
            algorithm=self._algorithm,
            expires_minutes=self._access_expire_minutes,
            additional_claims={"role": role.value},
        )

    def decode_access_token(self, token: str) -> dict[str, Any] | None:
        """Return the claims of a valid access token, or None."""
        payload = decode_token(token, secret=self._secret, algorithm=self._algorithm)
        if payload is None:
            return None
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            logger.warning(f"Rejected token of type {payload.get('type')!r} as access token")
            return None
        return payload

    async def issue_refresh_token(self, db: AsyncSession, user_id: int) -> str:
        """Generate, persist and return a new opaque refresh token."""
        token = generate_refresh_token()
        await repository.create_refresh_token(
            db,
            token_hash=hash_token(token),
            user_id=user_id,
            expires_at=self._clock() + timedelta(days=self._refresh_expire_days),
        )
        return token

    async def verify_refresh_token(self, db: AsyncSession, token: str) -> RefreshToken | None:
        return await repository.find_valid_refresh_token(
            db,
            token_hash=hash_token(token),
            now=self._clock(),
        )

    async def revoke(self, db: AsyncSession, token: str) -> int:
        """Delete the session for this token. Returns 0 or 1."""
        return await repository.delete_refresh_token(db, hash_token(token))

    async def revoke_all_for_user(self, db: AsyncSession, user_id: int) -> int:
        return await repository.delete_refresh_tokens_for_user(db, user_id)
