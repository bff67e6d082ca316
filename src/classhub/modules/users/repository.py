"""
User Repository

Database operations for user management.
"""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.modules.shared import SortOrder, apply_ordering, search_filter
from classhub.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)

USER_SORT_COLUMNS = {
    "created_at": User.created_at,
    "full_name": User.full_name,
    "email": User.email,
}


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        role: UserRole = UserRole.STUDENT,
        phone_number: str | None = None,
        is_active: bool = False,
        is_verified: bool = False,
    ) -> User:
        """
        Create a new user record.

        The flush surfaces a unique violation on email as IntegrityError;
        callers translate it.

        Args:
            db: Database session
            email: User's email address (unique)
            password_hash: Hashed password
            full_name: Display name
            role: User's role
            phone_number: Phone number (optional)
            is_active: Whether user may log in
            is_verified: Whether email is verified

        Returns:
            Created User instance
        """
        user = User(
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            phone_number=phone_number,
            is_active=is_active,
            is_verified=is_verified,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
        """Get a user by ID."""
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get a user by email address.

        Args:
            db: Database session
            email: Email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_users(
        db: AsyncSession,
        *,
        offset: int,
        limit: int,
        is_active: bool | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        order: SortOrder = SortOrder.DESC,
    ) -> tuple[Sequence[User], int]:
        """
        List users with filtering, search and pagination.

        Returns:
            Tuple of (users on this page, total matching count)
        """
        conditions = []
        if is_active is not None:
            conditions.append(User.is_active == is_active)
        matches = search_filter(search, User.full_name, User.email, User.phone_number)
        if matches is not None:
            conditions.append(matches)

        count_result = await db.execute(select(func.count(User.id)).where(*conditions))
        total = count_result.scalar_one()

        stmt = select(User).where(*conditions)
        stmt = apply_ordering(stmt, USER_SORT_COLUMNS[sort_by], order, User.id)
        result = await db.execute(stmt.offset(offset).limit(limit))

        return result.scalars().all(), total

    @staticmethod
    async def update(db: AsyncSession, user: User, **fields: Any) -> User:
        """Apply field changes to a user and flush."""
        for name, value in fields.items():
            setattr(user, name, value)
        await db.flush()
        return user
