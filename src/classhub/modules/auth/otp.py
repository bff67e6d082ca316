"""
One-Time-Code Issuer

Creates and validates short-lived numeric codes bound to an email and a
purpose. Codes are delivered out of band (email) by the caller.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.config import Settings
from classhub.core.security import generate_numeric_code
from classhub.modules.auth import repository
from classhub.modules.auth.models import OtpCode, OtpPurpose
from classhub.modules.shared import utcnow

logger = logging.getLogger(__name__)


class OtpIssuer:
    """Issue, verify and consume one-time codes."""

    def __init__(self, settings: Settings, clock: Callable[[], datetime] = utcnow):
        self._expire_minutes = settings.otp_expire_minutes
        self._length = settings.otp_length
        self._clock = clock

    async def issue(self, db: AsyncSession, email: str, purpose: OtpPurpose) -> str:
        """
        Generate and persist a new code for (email, purpose).

        Older codes for the same pair are deleted first so at most one
        code is live at a time.

        Returns:
            The plain code, for delivery to the user
        """
        await repository.delete_otp_codes(db, email=email, purpose=purpose)

        code = generate_numeric_code(self._length)
        expires_at = self._clock() + timedelta(minutes=self._expire_minutes)
        await repository.create_otp_code(
            db,
            email=email,
            code=code,
            purpose=purpose,
            expires_at=expires_at,
        )

        logger.info(f"Issued {purpose.value} code for {email}")
        return code

    async def verify(
        self,
        db: AsyncSession,
        email: str,
        code: str,
        purpose: OtpPurpose,
    ) -> OtpCode | None:
        """
        Look up an unexpired code matching all three fields.

        Wrong and expired codes are indistinguishable: both return None.
        """
        return await repository.find_valid_otp_code(
            db,
            email=email,
            code=code,
            purpose=purpose,
            now=self._clock(),
        )

    async def consume(self, db: AsyncSession, email: str, purpose: OtpPurpose) -> int:
        """Delete the codes for (email, purpose); other purposes are untouched."""
        deleted = await repository.delete_otp_codes(db, email=email, purpose=purpose)
        logger.debug(f"Consumed {deleted} {purpose.value} code(s) for {email}")
        return deleted
