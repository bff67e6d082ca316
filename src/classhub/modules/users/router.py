"""
Users Admin Router

All endpoints require the admin role.

Endpoints:
- GET /users - List users with filters and pagination
- GET /users/{user_id} - Get a user
- PUT /users/{user_id}/deactivate - Deactivate an account and revoke its sessions
- PUT /users/{user_id}/activate - Reactivate an account
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.auth import require_admin
from classhub.core.database import get_db
from classhub.modules.shared import Page
from classhub.modules.users import service
from classhub.modules.users.models import User
from classhub.modules.users.schemas import UserListParams, UserResponse

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=Page[UserResponse])
async def list_users(
    params: UserListParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await service.list_users(db, params)


@router.get("/{user_id}", response_model=UserResponse, responses={404: {"description": "Not found"}})
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)) -> User:
    return await service.get_user(db, user_id)


@router.put("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Deactivate an account. The user's refresh tokens are revoked."""
    return await service.deactivate_user(db, user_id, acting_user_id=admin.id)


@router.put("/{user_id}/activate", response_model=UserResponse)
async def activate_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> User:
    return await service.activate_user(db, user_id, acting_user_id=admin.id)
