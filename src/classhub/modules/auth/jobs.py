"""
Auth Background Jobs

Expired one-time codes and refresh tokens are never valid again, but they stay
in their tables until purged. This job removes them on an interval.

Lookups already ignore expired rows, so the job only keeps the tables small.
It is safe to run any number of times.
"""

import logging
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from classhub.core.config import Settings
from classhub.core.database import async_session_maker
from classhub.core.scheduler import register_job
from classhub.modules.auth import repository
from classhub.modules.shared import utcnow

logger = logging.getLogger(__name__)

JOB_ID_PURGE_EXPIRED_CREDENTIALS = "auth_purge_expired_credentials"


async def purge_expired_credentials() -> dict[str, Any]:
    """
    Delete expired one-time codes and refresh tokens.

    Returns:
        Counts of deleted rows per table
    """
    now = utcnow()

    async with async_session_maker() as db:
        otp_deleted = await repository.delete_expired_otp_codes(db, now)
        tokens_deleted = await repository.delete_expired_refresh_tokens(db, now)
        await db.commit()

    logger.info(
        f"Purged expired credentials: {otp_deleted} code(s), {tokens_deleted} refresh token(s)"
    )
    return {"otp_codes_deleted": otp_deleted, "refresh_tokens_deleted": tokens_deleted}


def register_auth_jobs(settings: Settings) -> None:
    """Register the credential purge job on the configured interval."""
    register_job(
        job_id=JOB_ID_PURGE_EXPIRED_CREDENTIALS,
        func=purge_expired_credentials,
        trigger=IntervalTrigger(minutes=settings.credential_purge_interval_minutes),
    )
    logger.info(
        f"Registered job: {JOB_ID_PURGE_EXPIRED_CREDENTIALS} "
        f"(interval: {settings.credential_purge_interval_minutes} minutes)"
    )
