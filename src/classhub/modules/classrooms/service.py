"""
Classroom Service Layer

Admin operations on classrooms and on individual student memberships:

1. Classroom CRUD with soft delete and restore
2. Classroom detail with pending join requests and current students
3. Membership actions: block (deactivate), unblock (activate), remove

Blocking or removing a student also deletes the join request for that
(classroom, student) pair, so a stale pending request cannot be approved
afterwards.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.exceptions import ConflictError, NotFoundError
from classhub.modules.classrooms import repository
from classhub.modules.classrooms.models import Classroom, ClassroomStudent
from classhub.modules.classrooms.schemas import (
    ClassroomDetailResponse,
    ClassroomListParams,
    ClassroomResponse,
    ClassroomStudentResponse,
    CreateClassroomRequest,
    PendingJoinRequestResponse,
    UpdateClassroomRequest,
)
from classhub.modules.join_requests import repository as join_request_repository
from classhub.modules.shared import ListParams, MessageResponse, build_page, utcnow

logger = logging.getLogger(__name__)

STUDENT_BLOCKED_MESSAGE = "Student has been blocked from the classroom"
STUDENT_UNBLOCKED_MESSAGE = "Student has been unblocked in the classroom"
STUDENT_REMOVED_MESSAGE = "Student has been removed from the classroom"


class ClassroomNotFoundError(NotFoundError):
    """Raised when a classroom is not found."""

    def __init__(self, classroom_id: int | None = None):
        message = f"Classroom {classroom_id} not found" if classroom_id else "Classroom not found"
        super().__init__(message=message, error_code="CLASSROOM_NOT_FOUND")


class ClassroomNameExistsError(ConflictError):
    def __init__(self, name: str):
        super().__init__(
            message=f"A classroom named '{name}' already exists.",
            error_code="CLASSROOM_NAME_EXISTS",
        )


class ClassroomStudentNotFoundError(NotFoundError):
    def __init__(self, classroom_id: int, student_id: int):
        super().__init__(
            message=f"Student {student_id} is not a member of classroom {classroom_id}",
            error_code="CLASSROOM_STUDENT_NOT_FOUND",
        )


async def _get_classroom_or_404(
    db: AsyncSession,
    classroom_id: int,
    *,
    include_deleted: bool = False,
) -> Classroom:
    classroom = await repository.get_by_id(db, classroom_id, include_deleted=include_deleted)
    if classroom is None:
        raise ClassroomNotFoundError(classroom_id)
    return classroom


async def list_classrooms(db: AsyncSession, params: ClassroomListParams) -> dict:
    classrooms, total = await repository.list_classrooms(
        db,
        offset=params.offset,
        limit=params.limit,
        is_archived=params.is_archived,
        search=params.search,
        sort_by=params.sort_by.value,
        order=params.order,
    )
    return build_page(classrooms, total, params, ClassroomResponse)


async def list_deleted_classrooms(db: AsyncSession, params: ListParams) -> dict:
    classrooms, total = await repository.list_classrooms(
        db,
        offset=params.offset,
        limit=params.limit,
        deleted=True,
        search=params.search,
        order=params.order,
    )
    return build_page(classrooms, total, params, ClassroomResponse)


async def get_classroom_detail(db: AsyncSession, classroom_id: int) -> ClassroomDetailResponse:
    classroom = await _get_classroom_or_404(db, classroom_id)
    pending = await join_request_repository.list_pending_for_classroom(db, classroom_id)
    members = await repository.list_members(db, classroom_id)

    return ClassroomDetailResponse(
        **ClassroomResponse.model_validate(classroom).model_dump(),
        join_requests=[PendingJoinRequestResponse.model_validate(jr) for jr in pending],
        classroom_students=[ClassroomStudentResponse.model_validate(m) for m in members],
    )


async def create_classroom(db: AsyncSession, data: CreateClassroomRequest) -> Classroom:
    """
    Create a classroom.

    Raises:
        ClassroomNameExistsError: If the name is taken (including deleted classrooms)
    """
    name = data.name.strip()
    try:
        classroom = await repository.create(db, name=name, description=data.description)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ClassroomNameExistsError(name) from e

    logger.info(f"Classroom created: {classroom.id} - {classroom.name}")
    return classroom


async def update_classroom(
    db: AsyncSession,
    classroom_id: int,
    data: UpdateClassroomRequest,
) -> Classroom:
    classroom = await _get_classroom_or_404(db, classroom_id)

    changes = data.model_dump(exclude_unset=True)
    # name and is_archived are not nullable; an explicit null means "unchanged"
    if changes.get("name") is None:
        changes.pop("name", None)
    else:
        changes["name"] = changes["name"].strip()
    if changes.get("is_archived") is None:
        changes.pop("is_archived", None)

    try:
        await repository.update(db, classroom, **changes)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ClassroomNameExistsError(changes["name"]) from e

    logger.info(f"Classroom updated: {classroom.id} ({sorted(changes)})")
    return classroom


async def delete_classroom(db: AsyncSession, classroom_id: int) -> MessageResponse:
    classroom = await _get_classroom_or_404(db, classroom_id)
    await repository.update(db, classroom, deleted_at=utcnow())
    await db.commit()

    logger.info(f"Classroom soft-deleted: {classroom.id} - {classroom.name}")
    return MessageResponse(message="Classroom has been deleted")


async def restore_classroom(db: AsyncSession, classroom_id: int) -> Classroom:
    """
    Undo a soft delete.

    Raises:
        ClassroomNotFoundError: If no deleted classroom has this id
    """
    classroom = await _get_classroom_or_404(db, classroom_id, include_deleted=True)
    if classroom.deleted_at is None:
        raise ClassroomNotFoundError(classroom_id)

    await repository.update(db, classroom, deleted_at=None)
    await db.commit()

    logger.info(f"Classroom restored: {classroom.id} - {classroom.name}")
    return classroom


# ============================================
# Membership actions
# ============================================


async def _get_membership_or_404(
    db: AsyncSession,
    classroom_id: int,
    student_id: int,
) -> ClassroomStudent:
    membership = await repository.get_membership(db, classroom_id, student_id)
    if membership is None or membership.deleted_at is not None:
        raise ClassroomStudentNotFoundError(classroom_id, student_id)
    return membership


async def deactivate_student(
    db: AsyncSession,
    classroom_id: int,
    student_id: int,
) -> MessageResponse:
    """Block a student and drop their join request for this classroom."""
    membership = await _get_membership_or_404(db, classroom_id, student_id)
    await repository.update_membership(db, membership, is_active=False)
    await join_request_repository.delete_for_pair(db, classroom_id, student_id)
    await db.commit()

    logger.info(f"Student {student_id} blocked in classroom {classroom_id}")
    return MessageResponse(message=STUDENT_BLOCKED_MESSAGE)


async def activate_student(
    db: AsyncSession,
    classroom_id: int,
    student_id: int,
) -> MessageResponse:
    membership = await _get_membership_or_404(db, classroom_id, student_id)
    await repository.update_membership(db, membership, is_active=True)
    await db.commit()

    logger.info(f"Student {student_id} unblocked in classroom {classroom_id}")
    return MessageResponse(message=STUDENT_UNBLOCKED_MESSAGE)


async def remove_student(
    db: AsyncSession,
    classroom_id: int,
    student_id: int,
) -> MessageResponse:
    """Remove a student; they may ask to join again later."""
    membership = await _get_membership_or_404(db, classroom_id, student_id)
    await repository.update_membership(db, membership, deleted_at=utcnow())
    await join_request_repository.delete_for_pair(db, classroom_id, student_id)
    await db.commit()

    logger.info(f"Student {student_id} removed from classroom {classroom_id}")
    return MessageResponse(message=STUDENT_REMOVED_MESSAGE)
