"""
Profile Service

Lets the authenticated user edit their own profile and change their password.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.exceptions import UnprocessableError
from classhub.core.security import hash_password_async, verify_password_async
from classhub.modules.auth import repository as auth_repository
from classhub.modules.profile.schemas import ChangePasswordRequest, UpdateProfileRequest
from classhub.modules.users.models import User
from classhub.modules.users.repository import UserRepository
from classhub.modules.users.service import PhoneNumberExistsError

logger = logging.getLogger(__name__)


class InvalidPasswordError(UnprocessableError):
    """Raised when the current password does not match."""

    def __init__(self):
        super().__init__(
            message="Current password is incorrect.",
            error_code="INVALID_PASSWORD",
        )


async def update_profile(db: AsyncSession, user: User, data: UpdateProfileRequest) -> User:
    changes = data.model_dump(exclude_unset=True)
    # full_name cannot be cleared; phone and avatar can
    if changes.get("full_name") is None:
        changes.pop("full_name", None)
    if not changes:
        return user

    user_id = user.id
    try:
        await UserRepository.update(db, user, **changes)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Profile update rejected for user {user_id}: phone number in use")
        raise PhoneNumberExistsError() from e

    logger.info(f"Profile updated for user {user.id}: {sorted(changes)}")
    return user


async def change_password(db: AsyncSession, user: User, data: ChangePasswordRequest) -> None:
    """
    Replace the password after checking the current one.

    Every refresh token of the user is revoked, so other devices must log in
    again.

    Raises:
        InvalidPasswordError: If current_password is wrong
    """
    if not await verify_password_async(data.current_password, user.password_hash):
        logger.warning(f"Password change rejected for user {user.id}: wrong current password")
        raise InvalidPasswordError()

    password_hash = await hash_password_async(data.new_password)
    await UserRepository.update(db, user, password_hash=password_hash)
    revoked = await auth_repository.delete_refresh_tokens_for_user(db, user.id)
    await db.commit()

    logger.info(f"Password changed for user {user.id} ({revoked} sessions revoked)")
