"""Join request schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from classhub.modules.classrooms.schemas import ClassroomResponse
from classhub.modules.join_requests.models import JoinRequestStatus


class CreateJoinRequest(BaseModel):
    classroom_id: int = Field(ge=1)


class LeaveClassroomRequest(BaseModel):
    classroom_id: int = Field(ge=1)


class JoinRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    classroom_id: int
    student_id: int
    status: JoinRequestStatus
    requested_at: datetime
    handled_at: datetime | None = None


class StudentClassroomResponse(ClassroomResponse):
    """A classroom as seen by a student browsing what they can join."""

    is_joined: bool = False
    join_request_status: JoinRequestStatus | None = None
