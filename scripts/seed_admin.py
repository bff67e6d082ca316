"""
Seed Admin User

Creates the initial admin account from the ADMIN_* settings
(ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_FULL_NAME, ADMIN_PHONE_NUMBER).
Run this script once after the first migration.

Usage:
    python scripts/seed_admin.py
"""

import asyncio
import logging

from classhub.core.config import settings
from classhub.core.database import async_session_maker, close_db
from classhub.core.security import hash_password_async
from classhub.modules.auth.service import normalize_email
from classhub.modules.users.models import User, UserRole
from classhub.modules.users.repository import UserRepository

logger = logging.getLogger("classhub.seed")


async def seed_admin() -> User:
    """Create the admin user if it doesn't exist."""
    email = normalize_email(settings.admin_email)

    async with async_session_maker() as db:
        existing_user = await UserRepository.get_by_email(db, email)
        if existing_user:
            logger.info(
                f"Admin already exists: {email} (id={existing_user.id}, "
                f"role={existing_user.role.value})"
            )
            return existing_user

        admin_user = await UserRepository.create(
            db,
            email=email,
            password_hash=await hash_password_async(settings.admin_password),
            full_name=settings.admin_full_name,
            phone_number=settings.admin_phone_number,
            role=UserRole.ADMIN,
            is_active=True,
            is_verified=True,
        )
        await db.commit()

    logger.info(f"Admin created: {email} (id={admin_user.id})")
    return admin_user


async def main() -> None:
    try:
        await seed_admin()
    finally:
        await close_db()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(main())
