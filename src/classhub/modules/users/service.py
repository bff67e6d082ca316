"""
User Administration Service

Admin-facing operations: list, inspect, activate and deactivate accounts.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.exceptions import ConflictError, NotFoundError, UnprocessableError
from classhub.modules.auth import repository as auth_repository
from classhub.modules.shared import build_page
from classhub.modules.users.models import User
from classhub.modules.users.repository import UserRepository
from classhub.modules.users.schemas import UserListParams, UserResponse

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, user_id: int | None = None):
        message = f"User {user_id} not found" if user_id else "User not found"
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class PhoneNumberExistsError(ConflictError):
    """Raised when a phone number already belongs to another account."""

    def __init__(self):
        super().__init__(
            message="An account with this phone number already exists.",
            error_code="PHONE_NUMBER_EXISTS",
        )


async def list_users(db: AsyncSession, params: UserListParams) -> dict:
    users, total = await UserRepository.list_users(
        db,
        offset=params.offset,
        limit=params.limit,
        is_active=params.is_active,
        search=params.search,
        sort_by=params.sort_by.value,
        order=params.order,
    )
    return build_page(users, total, params, UserResponse)


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def deactivate_user(db: AsyncSession, user_id: int, acting_user_id: int) -> User:
    """
    Deactivate an account and end all of its sessions.

    Raises:
        UnprocessableError: If an administrator targets their own account
        UserNotFoundError: If the user does not exist
    """
    if user_id == acting_user_id:
        raise UnprocessableError(
            message="You cannot deactivate your own account.",
            error_code="CANNOT_DEACTIVATE_SELF",
        )

    user = await get_user(db, user_id)
    await UserRepository.update(db, user, is_active=False)
    revoked = await auth_repository.delete_refresh_tokens_for_user(db, user.id)
    await db.commit()

    logger.info(f"User {user.id} deactivated by admin {acting_user_id} ({revoked} sessions revoked)")
    return user


async def activate_user(db: AsyncSession, user_id: int, acting_user_id: int) -> User:
    user = await get_user(db, user_id)
    await UserRepository.update(db, user, is_active=True)
    await db.commit()

    logger.info(f"User {user.id} activated by admin {acting_user_id}")
    return user
