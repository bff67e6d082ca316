"""User schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from classhub.modules.shared import ListParams
from classhub.modules.users.models import UserRole


class UserSortBy(str, Enum):
    CREATED_AT = "created_at"
    FULL_NAME = "full_name"
    EMAIL = "email"


class UserListParams(ListParams):
    """Query parameters for the admin user list."""

    is_active: bool | None = None
    sort_by: UserSortBy = UserSortBy.CREATED_AT


class UserResponse(BaseModel):
    """Public representation of a user (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    phone_number: str | None = None
    avatar_media_id: int | None = None
    role: UserRole
    is_active: bool
    is_verified: bool
    created_at: datetime
    updated_at: datetime


class UserSummary(BaseModel):
    """Compact user representation nested inside other resources."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    avatar_media_id: int | None = None
