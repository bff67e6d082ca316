"""
Profile Router

Endpoints:
- GET /profile - Current user's profile
- PUT /profile - Update name, phone number or avatar
- PUT /profile/change-password - Change password
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.auth import get_current_user
from classhub.core.database import get_db
from classhub.modules.profile import service
from classhub.modules.profile.schemas import ChangePasswordRequest, UpdateProfileRequest
from classhub.modules.shared import MessageResponse
from classhub.modules.users.models import User
from classhub.modules.users.schemas import UserResponse

router = APIRouter()


@router.get("", response_model=UserResponse)
async def get_profile(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)


@router.put("", response_model=UserResponse)
async def update_profile(
    data: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    updated = await service.update_profile(db, user, data)
    return UserResponse.model_validate(updated)


@router.put(
    "/change-password",
    response_model=MessageResponse,
    responses={422: {"description": "Current password is incorrect"}},
)
async def change_password(
    data: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Change the password. Other sessions are logged out."""
    await service.change_password(db, user, data)
    return MessageResponse(message="Password changed successfully.")
