"""
Lecture Repository
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.modules.lectures.models import Lecture
from classhub.modules.shared import SortOrder, apply_ordering, search_filter

LECTURE_SORT_COLUMNS = {
    "created_at": Lecture.created_at,
    "title": Lecture.title,
}


async def create(
    db: AsyncSession,
    *,
    title: str,
    parent_id: int | None = None,
    content: str | None = None,
    media_id: int | None = None,
) -> Lecture:
    lecture = Lecture(parent_id=parent_id, title=title, content=content, media_id=media_id)
    db.add(lecture)
    await db.flush()
    return lecture


async def get_by_id(db: AsyncSession, lecture_id: int) -> Lecture | None:
    """Get a live (non-deleted) lecture."""
    result = await db.execute(
        select(Lecture).where(Lecture.id == lecture_id, Lecture.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def list_lectures(
    db: AsyncSession,
    *,
    offset: int,
    limit: int,
    search: str | None = None,
    sort_by: str = "created_at",
    order: SortOrder = SortOrder.DESC,
) -> tuple[Sequence[Lecture], int]:
    conditions = [Lecture.deleted_at.is_(None)]
    matches = search_filter(search, Lecture.title)
    if matches is not None:
        conditions.append(matches)

    count_result = await db.execute(select(func.count(Lecture.id)).where(*conditions))
    total = count_result.scalar_one()

    stmt = select(Lecture).where(*conditions)
    stmt = apply_ordering(stmt, LECTURE_SORT_COLUMNS[sort_by], order, Lecture.id)
    result = await db.execute(stmt.offset(offset).limit(limit))

    return result.scalars().all(), total


async def list_all(db: AsyncSession) -> Sequence[Lecture]:
    """Every live lecture, in creation order."""
    result = await db.execute(
        select(Lecture)
        .where(Lecture.deleted_at.is_(None))
        .order_by(Lecture.created_at.asc(), Lecture.id.asc())
    )
    return result.scalars().all()


async def get_parent_ids(db: AsyncSession) -> dict[int, int | None]:
    """Map of lecture id to parent id across all lectures, deleted included."""
    result = await db.execute(select(Lecture.id, Lecture.parent_id))
    return {row.id: row.parent_id for row in result}


async def update(db: AsyncSession, lecture: Lecture, **fields: Any) -> Lecture:
    for name, value in fields.items():
        setattr(lecture, name, value)
    await db.flush()
    return lecture
