"""
Classrooms Admin Router

All endpoints require the admin role.

Endpoints:
- GET /classrooms - List classrooms
- GET /classrooms/deleted - List soft-deleted classrooms
- GET /classrooms/{id} - Classroom detail with pending requests and students
- POST /classrooms - Create a classroom
- PUT /classrooms/{id} - Update a classroom
- DELETE /classrooms/{id} - Soft-delete a classroom
- PUT /classrooms/{id}/restore - Restore a soft-deleted classroom
- PUT /classrooms/{id}/students/{student_id}/deactivate - Block a student
- PUT /classrooms/{id}/students/{student_id}/activate - Unblock a student
- DELETE /classrooms/{id}/students/{student_id} - Remove a student
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.auth import require_admin
from classhub.core.database import get_db
from classhub.modules.classrooms import service
from classhub.modules.classrooms.models import Classroom
from classhub.modules.classrooms.schemas import (
    ClassroomDetailResponse,
    ClassroomListParams,
    ClassroomResponse,
    CreateClassroomRequest,
    UpdateClassroomRequest,
)
from classhub.modules.shared import ListParams, MessageResponse, Page

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=Page[ClassroomResponse])
async def list_classrooms(
    params: ClassroomListParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await service.list_classrooms(db, params)


@router.get("/deleted", response_model=Page[ClassroomResponse])
async def list_deleted_classrooms(
    params: ListParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await service.list_deleted_classrooms(db, params)


@router.get("/{classroom_id}", response_model=ClassroomDetailResponse)
async def get_classroom(
    classroom_id: int,
    db: AsyncSession = Depends(get_db),
) -> ClassroomDetailResponse:
    return await service.get_classroom_detail(db, classroom_id)


@router.post(
    "",
    response_model=ClassroomResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Classroom name already exists"}},
)
async def create_classroom(
    data: CreateClassroomRequest,
    db: AsyncSession = Depends(get_db),
) -> Classroom:
    return await service.create_classroom(db, data)


@router.put("/{classroom_id}", response_model=ClassroomResponse)
async def update_classroom(
    classroom_id: int,
    data: UpdateClassroomRequest,
    db: AsyncSession = Depends(get_db),
) -> Classroom:
    return await service.update_classroom(db, classroom_id, data)


@router.delete("/{classroom_id}", response_model=MessageResponse)
async def delete_classroom(
    classroom_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    return await service.delete_classroom(db, classroom_id)


@router.put("/{classroom_id}/restore", response_model=ClassroomResponse)
async def restore_classroom(
    classroom_id: int,
    db: AsyncSession = Depends(get_db),
) -> Classroom:
    return await service.restore_classroom(db, classroom_id)


@router.put("/{classroom_id}/students/{student_id}/deactivate", response_model=MessageResponse)
async def deactivate_student(
    classroom_id: int,
    student_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Block a student from the classroom."""
    return await service.deactivate_student(db, classroom_id, student_id)


@router.put("/{classroom_id}/students/{student_id}/activate", response_model=MessageResponse)
async def activate_student(
    classroom_id: int,
    student_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    return await service.activate_student(db, classroom_id, student_id)


@router.delete("/{classroom_id}/students/{student_id}", response_model=MessageResponse)
async def remove_student(
    classroom_id: int,
    student_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    return await service.remove_student(db, classroom_id, student_id)
