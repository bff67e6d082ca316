"""
Auth Repository

Database operations for one-time codes and refresh tokens. Lookups apply the
validity predicate (expires_at > now) in SQL; deletes return the affected row
count so callers can detect concurrent consumption.

Storage errors are not caught here.
"""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.modules.auth.models import OtpCode, OtpPurpose, RefreshToken

# Purges skip in-session synchronization; nothing they match is loaded in the
# request that runs them.
_BULK = {"synchronize_session": False}
# Flow deletes may hit rows loaded earlier in the same session (a rotated
# refresh token, a consumed code); matching instances are evicted.
_SYNC = {"synchronize_session": "evaluate"}


# ============================================
# One-time codes
# ============================================


async def create_otp_code(
    db: AsyncSession,
    *,
    email: str,
    code: str,
    purpose: OtpPurpose,
    expires_at: datetime,
) -> OtpCode:
    """Persist a new one-time code."""
    otp = OtpCode(email=email, code=code, purpose=purpose, expires_at=expires_at)
    db.add(otp)
    await db.flush()
    return otp


async def find_valid_otp_code(
    db: AsyncSession,
    *,
    email: str,
    code: str,
    purpose: OtpPurpose,
    now: datetime,
) -> OtpCode | None:
    """Find an unexpired code matching email, code and purpose exactly."""
    result = await db.execute(
        select(OtpCode)
        .where(
            OtpCode.email == email,
            OtpCode.code == code,
            OtpCode.purpose == purpose,
            OtpCode.expires_at > now,
        )
        .order_by(OtpCode.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def delete_otp_codes(db: AsyncSession, *, email: str, purpose: OtpPurpose) -> int:
    """Delete every code for an (email, purpose) pair."""
    result = await db.execute(
        delete(OtpCode)
        .where(OtpCode.email == email, OtpCode.purpose == purpose)
        .execution_options(**_SYNC)
    )
    return result.rowcount


async def delete_expired_otp_codes(db: AsyncSession, now: datetime) -> int:
    result = await db.execute(
        delete(OtpCode).where(OtpCode.expires_at <= now).execution_options(**_BULK)
    )
    return result.rowcount


# ============================================
# Refresh tokens
# ============================================


async def create_refresh_token(
    db: AsyncSession,
    *,
    token_hash: str,
    user_id: int,
    expires_at: datetime,
) -> RefreshToken:
    """Persist a refresh-token session."""
    refresh_token = RefreshToken(token_hash=token_hash, user_id=user_id, expires_at=expires_at)
    db.add(refresh_token)
    await db.flush()
    return refresh_token


async def find_valid_refresh_token(
    db: AsyncSession,
    *,
    token_hash: str,
    now: datetime,
) -> RefreshToken | None:
    """Find an unexpired session by token digest."""
    result = await db.execute(
        select(RefreshToken).where(
            RefreshToken.token_hash == token_hash,
            RefreshToken.expires_at > now,
        )
    )
    return result.scalar_one_or_none()


async def delete_refresh_token(db: AsyncSession, token_hash: str) -> int:
    """Delete a session by token digest. Deleting nothing is not an error."""
    result = await db.execute(
        delete(RefreshToken)
        .where(RefreshToken.token_hash == token_hash)
        .execution_options(**_SYNC)
    )
    return result.rowcount


async def delete_refresh_tokens_for_user(db: AsyncSession, user_id: int) -> int:
    """Delete every session belonging to a user."""
    result = await db.execute(
        delete(RefreshToken).where(RefreshToken.user_id == user_id).execution_options(**_SYNC)
    )
    return result.rowcount


async def delete_expired_refresh_tokens(db: AsyncSession, now: datetime) -> int:
    result = await db.execute(
        delete(RefreshToken).where(RefreshToken.expires_at <= now).execution_options(**_BULK)
    )
    return result.rowcount
