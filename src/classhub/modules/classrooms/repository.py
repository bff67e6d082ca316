"""
Classroom Repository

Database operations for classrooms and classroom memberships.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.modules.classrooms.models import Classroom, ClassroomStudent
from classhub.modules.shared import SortOrder, apply_ordering, search_filter

CLASSROOM_SORT_COLUMNS = {
    "created_at": Classroom.created_at,
    "name": Classroom.name,
}


# ============================================
# Classrooms
# ============================================


async def create(db: AsyncSession, *, name: str, description: str | None) -> Classroom:
    classroom = Classroom(name=name, description=description)
    db.add(classroom)
    await db.flush()
    return classroom


async def get_by_id(
    db: AsyncSession,
    classroom_id: int,
    *,
    include_deleted: bool = False,
) -> Classroom | None:
    """Get a classroom by ID; soft-deleted rows only when include_deleted."""
    stmt = select(Classroom).where(Classroom.id == classroom_id)
    if not include_deleted:
        stmt = stmt.where(Classroom.deleted_at.is_(None))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_classrooms(
    db: AsyncSession,
    *,
    offset: int,
    limit: int,
    deleted: bool = False,
    is_archived: bool | None = None,
    search: str | None = None,
    sort_by: str = "created_at",
    order: SortOrder = SortOrder.DESC,
) -> tuple[Sequence[Classroom], int]:
    """
    List classrooms with filtering, search and pagination.

    Args:
        deleted: List soft-deleted classrooms instead of live ones

    Returns:
        Tuple of (classrooms on this page, total matching count)
    """
    conditions = [
        Classroom.deleted_at.is_not(None) if deleted else Classroom.deleted_at.is_(None),
    ]
    if is_archived is not None:
        conditions.append(Classroom.is_archived == is_archived)
    matches = search_filter(search, Classroom.name, Classroom.description)
    if matches is not None:
        conditions.append(matches)

    count_result = await db.execute(select(func.count(Classroom.id)).where(*conditions))
    total = count_result.scalar_one()

    stmt = select(Classroom).where(*conditions)
    stmt = apply_ordering(stmt, CLASSROOM_SORT_COLUMNS[sort_by], order, Classroom.id)
    result = await db.execute(stmt.offset(offset).limit(limit))

    return result.scalars().all(), total


async def list_joined_by_student(db: AsyncSession, student_id: int) -> Sequence[Classroom]:
    """Live classrooms where the student holds an active, non-removed membership."""
    result = await db.execute(
        select(Classroom)
        .join(ClassroomStudent, ClassroomStudent.classroom_id == Classroom.id)
        .where(
            ClassroomStudent.student_id == student_id,
            ClassroomStudent.is_active.is_(True),
            ClassroomStudent.deleted_at.is_(None),
            Classroom.deleted_at.is_(None),
        )
        .order_by(Classroom.name.asc())
    )
    return result.scalars().all()


async def update(db: AsyncSession, classroom: Classroom, **fields: Any) -> Classroom:
    for name, value in fields.items():
        setattr(classroom, name, value)
    await db.flush()
    return classroom


# ============================================
# Memberships
# ============================================


async def get_membership(
    db: AsyncSession,
    classroom_id: int,
    student_id: int,
) -> ClassroomStudent | None:
    """Get the membership row for a pair, including removed ones."""
    result = await db.execute(
        select(ClassroomStudent).where(
            ClassroomStudent.classroom_id == classroom_id,
            ClassroomStudent.student_id == student_id,
        )
    )
    return result.scalar_one_or_none()


async def get_memberships_for_student(
    db: AsyncSession,
    student_id: int,
    classroom_ids: Sequence[int],
) -> Sequence[ClassroomStudent]:
    if not classroom_ids:
        return []
    result = await db.execute(
        select(ClassroomStudent).where(
            ClassroomStudent.student_id == student_id,
            ClassroomStudent.classroom_id.in_(classroom_ids),
        )
    )
    return result.scalars().all()


async def list_members(db: AsyncSession, classroom_id: int) -> Sequence[ClassroomStudent]:
    """Non-removed memberships of a classroom (active and blocked)."""
    result = await db.execute(
        select(ClassroomStudent)
        .where(
            ClassroomStudent.classroom_id == classroom_id,
            ClassroomStudent.deleted_at.is_(None),
        )
        .order_by(ClassroomStudent.created_at.asc(), ClassroomStudent.id.asc())
    )
    return result.scalars().all()


async def create_membership(
    db: AsyncSession,
    *,
    classroom_id: int,
    student_id: int,
) -> ClassroomStudent:
    membership = ClassroomStudent(classroom_id=classroom_id, student_id=student_id, is_active=True)
    db.add(membership)
    await db.flush()
    return membership


async def update_membership(
    db: AsyncSession,
    membership: ClassroomStudent,
    **fields: Any,
) -> ClassroomStudent:
    for name, value in fields.items():
        setattr(membership, name, value)
    await db.flush()
    return membership
