"""
Join Requests Router

Student endpoints:
- GET /join-requests/classrooms - Browse joinable classrooms
- GET /join-requests/joined-classrooms - Classrooms the student belongs to
- POST /join-requests - Ask to join a classroom
- POST /join-requests/leave - Leave a classroom

Admin endpoints:
- PUT /join-requests/{request_id}/approve - Approve a pending request
- PUT /join-requests/{request_id}/reject - Reject a pending request
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.auth import require_admin, require_student
from classhub.core.database import get_db
from classhub.modules.classrooms.models import Classroom
from classhub.modules.classrooms.schemas import ClassroomListParams, ClassroomResponse
from classhub.modules.join_requests import service
from classhub.modules.join_requests.models import JoinRequest
from classhub.modules.join_requests.schemas import (
    CreateJoinRequest,
    JoinRequestResponse,
    LeaveClassroomRequest,
    StudentClassroomResponse,
)
from classhub.modules.shared import MessageResponse, Page
from classhub.modules.users.models import User

router = APIRouter()


# ============================================
# Student
# ============================================


@router.get("/classrooms", response_model=Page[StudentClassroomResponse])
async def list_available_classrooms(
    params: ClassroomListParams = Depends(),
    student: User = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await service.list_available_classrooms(db, student, params)


@router.get("/joined-classrooms", response_model=list[ClassroomResponse])
async def list_joined_classrooms(
    student: User = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> list[Classroom]:
    return await service.list_joined_classrooms(db, student)


@router.post(
    "",
    response_model=JoinRequestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Classroom not found"},
        409: {"description": "Already a member or already requested"},
        422: {"description": "Classroom archived or student blocked"},
    },
)
async def create_join_request(
    data: CreateJoinRequest,
    student: User = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> JoinRequest:
    """
    Ask to join a classroom.

    A previously rejected request is reset to pending.
    """
    return await service.create_join_request(db, student, data.classroom_id)


@router.post("/leave", response_model=MessageResponse)
async def leave_classroom(
    data: LeaveClassroomRequest,
    student: User = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    return await service.leave_classroom(db, student, data.classroom_id)


# ============================================
# Admin
# ============================================


@router.put("/{request_id}/approve", response_model=JoinRequestResponse)
async def approve_join_request(
    request_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> JoinRequest:
    return await service.approve_join_request(db, request_id, admin)


@router.put("/{request_id}/reject", response_model=JoinRequestResponse)
async def reject_join_request(
    request_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> JoinRequest:
    return await service.reject_join_request(db, request_id, admin)
