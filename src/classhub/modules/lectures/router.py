"""
Lectures Router

Endpoints:
- GET /lectures - Paginated lecture list (any authenticated user)
- GET /lectures/tree - All lectures as a nested tree (any authenticated user)
- GET /lectures/{id} - Lecture with content (any authenticated user)
- POST /lectures - Create a lecture (admin)
- PUT /lectures/{id} - Update or move a lecture (admin)
- DELETE /lectures/{id} - Soft-delete a lecture (admin)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.auth import get_current_user, require_admin
from classhub.core.database import get_db
from classhub.modules.lectures import service
from classhub.modules.lectures.models import Lecture
from classhub.modules.lectures.schemas import (
    CreateLectureRequest,
    LectureDetailResponse,
    LectureListParams,
    LectureResponse,
    LectureTreeResponse,
    UpdateLectureRequest,
)
from classhub.modules.shared import MessageResponse, Page

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=Page[LectureResponse])
async def list_lectures(
    params: LectureListParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await service.list_lectures(db, params)


@router.get("/tree", response_model=LectureTreeResponse)
async def get_lecture_tree(db: AsyncSession = Depends(get_db)) -> LectureTreeResponse:
    return await service.get_lecture_tree(db)


@router.get("/{lecture_id}", response_model=LectureDetailResponse)
async def get_lecture(lecture_id: int, db: AsyncSession = Depends(get_db)) -> Lecture:
    return await service.get_lecture(db, lecture_id)


@router.post(
    "",
    response_model=LectureDetailResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_lecture(
    data: CreateLectureRequest,
    db: AsyncSession = Depends(get_db),
) -> Lecture:
    return await service.create_lecture(db, data)


@router.put(
    "/{lecture_id}",
    response_model=LectureDetailResponse,
    dependencies=[Depends(require_admin)],
    responses={422: {"description": "Parent would create a cycle"}},
)
async def update_lecture(
    lecture_id: int,
    data: UpdateLectureRequest,
    db: AsyncSession = Depends(get_db),
) -> Lecture:
    return await service.update_lecture(db, lecture_id, data)


@router.delete(
    "/{lecture_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_lecture(lecture_id: int, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    return await service.delete_lecture(db, lecture_id)
