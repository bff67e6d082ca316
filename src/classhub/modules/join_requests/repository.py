"""
Join Request Repository
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.modules.join_requests.models import JoinRequest, JoinRequestStatus


async def create(db: AsyncSession, *, classroom_id: int, student_id: int) -> JoinRequest:
    join_request = JoinRequest(
        classroom_id=classroom_id,
        student_id=student_id,
        status=JoinRequestStatus.PENDING,
    )
    db.add(join_request)
    await db.flush()
    return join_request


async def get_by_id(db: AsyncSession, request_id: int) -> JoinRequest | None:
    return await db.get(JoinRequest, request_id)


async def get_for_pair(db: AsyncSession, classroom_id: int, student_id: int) -> JoinRequest | None:
    result = await db.execute(
        select(JoinRequest).where(
            JoinRequest.classroom_id == classroom_id,
            JoinRequest.student_id == student_id,
        )
    )
    return result.scalar_one_or_none()


async def get_for_student(
    db: AsyncSession,
    student_id: int,
    classroom_ids: Sequence[int],
) -> Sequence[JoinRequest]:
    if not classroom_ids:
        return []
    result = await db.execute(
        select(JoinRequest).where(
            JoinRequest.student_id == student_id,
            JoinRequest.classroom_id.in_(classroom_ids),
        )
    )
    return result.scalars().all()


async def list_pending_for_classroom(db: AsyncSession, classroom_id: int) -> Sequence[JoinRequest]:
    """Pending requests of a classroom, oldest first."""
    result = await db.execute(
        select(JoinRequest)
        .where(
            JoinRequest.classroom_id == classroom_id,
            JoinRequest.status == JoinRequestStatus.PENDING,
        )
        .order_by(JoinRequest.requested_at.asc(), JoinRequest.id.asc())
    )
    return result.scalars().all()


async def update(db: AsyncSession, join_request: JoinRequest, **fields: Any) -> JoinRequest:
    for name, value in fields.items():
        setattr(join_request, name, value)
    await db.flush()
    return join_request


async def delete_for_pair(db: AsyncSession, classroom_id: int, student_id: int) -> int:
    """Delete the request for a (classroom, student) pair. Returns rows deleted."""
    result = await db.execute(
        delete(JoinRequest)
        .where(
            JoinRequest.classroom_id == classroom_id,
            JoinRequest.student_id == student_id,
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
