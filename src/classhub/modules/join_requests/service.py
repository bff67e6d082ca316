"""
Join Request Service Layer

Student side:
- Browse joinable classrooms with their membership and request status
- List joined classrooms
- Ask to join a classroom, leave a classroom

Admin side:
- Approve a pending request (creates or revives the membership)
- Reject a pending request

Rules:
- Deleted classrooms are invisible; archived ones accept no new requests
- A blocked student cannot request to join, leave or be approved
- A rejected request can be re-submitted, which resets it to pending
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.exceptions import ConflictError, NotFoundError, UnprocessableError
from classhub.modules.classrooms import repository as classroom_repository
from classhub.modules.classrooms.models import Classroom, ClassroomStudent
from classhub.modules.classrooms.schemas import ClassroomListParams, ClassroomResponse
from classhub.modules.classrooms.service import ClassroomNotFoundError
from classhub.modules.join_requests import repository
from classhub.modules.join_requests.models import JoinRequest, JoinRequestStatus
from classhub.modules.join_requests.schemas import StudentClassroomResponse
from classhub.modules.shared import MessageResponse, build_page, utcnow
from classhub.modules.users.models import User

logger = logging.getLogger(__name__)


class JoinRequestNotFoundError(NotFoundError):
    def __init__(self, request_id: int):
        super().__init__(
            message=f"Join request {request_id} not found",
            error_code="JOIN_REQUEST_NOT_FOUND",
        )


class JoinRequestExistsError(ConflictError):
    def __init__(self):
        super().__init__(
            message="You have already requested to join this classroom.",
            error_code="JOIN_REQUEST_EXISTS",
        )


class AlreadyMemberError(ConflictError):
    def __init__(self):
        super().__init__(
            message="You are already a member of this classroom.",
            error_code="ALREADY_MEMBER",
        )


class StudentBlockedError(UnprocessableError):
    def __init__(self):
        super().__init__(
            message="The student is blocked from this classroom.",
            error_code="STUDENT_BLOCKED",
        )


class ClassroomArchivedError(UnprocessableError):
    def __init__(self):
        super().__init__(
            message="This classroom is archived and does not accept new students.",
            error_code="CLASSROOM_ARCHIVED",
        )


class JoinRequestNotPendingError(UnprocessableError):
    def __init__(self, status: JoinRequestStatus):
        super().__init__(
            message=f"Join request has already been {status.value}.",
            error_code="JOIN_REQUEST_NOT_PENDING",
        )


class NotAMemberError(NotFoundError):
    def __init__(self, classroom_id: int):
        super().__init__(
            message=f"You are not a member of classroom {classroom_id}",
            error_code="CLASSROOM_STUDENT_NOT_FOUND",
        )


def _is_current_member(membership: ClassroomStudent | None) -> bool:
    return membership is not None and membership.deleted_at is None and membership.is_active


def _is_blocked(membership: ClassroomStudent | None) -> bool:
    return membership is not None and membership.deleted_at is None and not membership.is_active


async def list_available_classrooms(
    db: AsyncSession,
    student: User,
    params: ClassroomListParams,
) -> dict:
    """Live, non-archived classrooms annotated with the student's status."""
    classrooms, total = await classroom_repository.list_classrooms(
        db,
        offset=params.offset,
        limit=params.limit,
        is_archived=False,
        search=params.search,
        sort_by=params.sort_by.value,
        order=params.order,
    )

    classroom_ids = [classroom.id for classroom in classrooms]
    memberships = {
        m.classroom_id: m
        for m in await classroom_repository.get_memberships_for_student(
            db, student.id, classroom_ids
        )
    }
    requests = {
        jr.classroom_id: jr
        for jr in await repository.get_for_student(db, student.id, classroom_ids)
    }

    items = []
    for classroom in classrooms:
        join_request = requests.get(classroom.id)
        items.append(
            StudentClassroomResponse(
                **ClassroomResponse.model_validate(classroom).model_dump(),
                is_joined=_is_current_member(memberships.get(classroom.id)),
                join_request_status=join_request.status if join_request else None,
            )
        )

    return build_page(items, total, params, StudentClassroomResponse)


async def list_joined_classrooms(db: AsyncSession, student: User) -> list[Classroom]:
    return list(await classroom_repository.list_joined_by_student(db, student.id))


async def create_join_request(db: AsyncSession, student: User, classroom_id: int) -> JoinRequest:
    """
    Ask to join a classroom.

    Raises:
        ClassroomNotFoundError: Classroom missing or deleted
        ClassroomArchivedError: Classroom archived
        AlreadyMemberError: Student is already an active member
        StudentBlockedError: Student is blocked from the classroom
        JoinRequestExistsError: A pending or approved request exists
    """
    classroom = await classroom_repository.get_by_id(db, classroom_id)
    if classroom is None:
        raise ClassroomNotFoundError(classroom_id)
    if classroom.is_archived:
        raise ClassroomArchivedError()

    membership = await classroom_repository.get_membership(db, classroom_id, student.id)
    if _is_current_member(membership):
        raise AlreadyMemberError()
    if _is_blocked(membership):
        raise StudentBlockedError()

    existing = await repository.get_for_pair(db, classroom_id, student.id)
    if existing is not None:
        if existing.status != JoinRequestStatus.REJECTED:
            raise JoinRequestExistsError()
        join_request = await repository.update(
            db,
            existing,
            status=JoinRequestStatus.PENDING,
            requested_at=utcnow(),
            handled_at=None,
        )
        await db.commit()
        logger.info(f"Join request {join_request.id} re-submitted by student {student.id}")
        return join_request

    student_id = student.id
    try:
        join_request = await repository.create(
            db, classroom_id=classroom_id, student_id=student_id
        )
        await db.commit()
    except IntegrityError as e:
        # lost a race with a concurrent request for the same pair
        await db.rollback()
        logger.warning(f"Duplicate join request: student {student_id} -> classroom {classroom_id}")
        raise JoinRequestExistsError() from e

    logger.info(
        f"Join request {join_request.id} created: student {student_id} -> classroom {classroom_id}"
    )
    return join_request


async def leave_classroom(db: AsyncSession, student: User, classroom_id: int) -> MessageResponse:
    membership = await classroom_repository.get_membership(db, classroom_id, student.id)
    if membership is None or membership.deleted_at is not None:
        raise NotAMemberError(classroom_id)
    if _is_blocked(membership):
        raise StudentBlockedError()

    await classroom_repository.update_membership(db, membership, deleted_at=utcnow())
    await repository.delete_for_pair(db, classroom_id, student.id)
    await db.commit()

    logger.info(f"Student {student.id} left classroom {classroom_id}")
    return MessageResponse(message="You have left the classroom")


async def _get_pending_request(db: AsyncSession, request_id: int) -> JoinRequest:
    join_request = await repository.get_by_id(db, request_id)
    if join_request is None:
        raise JoinRequestNotFoundError(request_id)
    if join_request.status != JoinRequestStatus.PENDING:
        raise JoinRequestNotPendingError(join_request.status)
    return join_request


async def approve_join_request(db: AsyncSession, request_id: int, admin: User) -> JoinRequest:
    """
    Approve a pending request and enroll the student.

    A membership removed earlier is revived rather than duplicated.

    Raises:
        JoinRequestNotFoundError: Unknown request
        JoinRequestNotPendingError: Request already handled
        StudentBlockedError: Student is blocked from the classroom
    """
    join_request = await _get_pending_request(db, request_id)
    classroom_id, student_id = join_request.classroom_id, join_request.student_id

    membership = await classroom_repository.get_membership(db, classroom_id, student_id)
    if _is_blocked(membership):
        raise StudentBlockedError()

    if membership is None:
        await classroom_repository.create_membership(
            db, classroom_id=classroom_id, student_id=student_id
        )
    elif membership.deleted_at is not None:
        await classroom_repository.update_membership(
            db, membership, deleted_at=None, is_active=True
        )

    await repository.update(
        db,
        join_request,
        status=JoinRequestStatus.APPROVED,
        handled_at=utcnow(),
    )
    await db.commit()

    logger.info(
        f"Join request {request_id} approved by admin {admin.id}: "
        f"student {student_id} -> classroom {classroom_id}"
    )
    return join_request


async def reject_join_request(db: AsyncSession, request_id: int, admin: User) -> JoinRequest:
    join_request = await _get_pending_request(db, request_id)
    await repository.update(
        db,
        join_request,
        status=JoinRequestStatus.REJECTED,
        handled_at=utcnow(),
    )
    await db.commit()

    logger.info(f"Join request {request_id} rejected by admin {admin.id}")
    return join_request
