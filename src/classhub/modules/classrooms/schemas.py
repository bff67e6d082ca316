"""Classroom schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from classhub.modules.join_requests.models import JoinRequestStatus
from classhub.modules.shared import ListParams
from classhub.modules.users.schemas import UserSummary


class ClassroomSortBy(str, Enum):
    CREATED_AT = "created_at"
    NAME = "name"


class ClassroomListParams(ListParams):
    is_archived: bool | None = None
    sort_by: ClassroomSortBy = ClassroomSortBy.CREATED_AT


class CreateClassroomRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)


class UpdateClassroomRequest(BaseModel):
    """Fields left out of the request are not changed."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    is_archived: bool | None = None


class ClassroomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    is_archived: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class ClassroomStudentResponse(BaseModel):
    """A membership with the student's summary."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    classroom_id: int
    student_id: int
    is_active: bool
    created_at: datetime
    student: UserSummary


class PendingJoinRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    status: JoinRequestStatus
    requested_at: datetime
    student: UserSummary


class ClassroomDetailResponse(ClassroomResponse):
    """Classroom with its pending join requests and current students."""

    join_requests: list[PendingJoinRequestResponse]
    classroom_students: list[ClassroomStudentResponse]
