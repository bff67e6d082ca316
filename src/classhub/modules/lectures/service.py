"""
Lecture Service Layer

Lectures form a tree through parent_id. Reads are open to every
authenticated user; writes are admin-only (enforced by the router).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.exceptions import NotFoundError, UnprocessableError
from classhub.modules.lectures import repository
from classhub.modules.lectures.models import Lecture
from classhub.modules.lectures.schemas import (
    CreateLectureRequest,
    LectureListParams,
    LectureResponse,
    LectureTreeNode,
    LectureTreeResponse,
    UpdateLectureRequest,
)
from classhub.modules.shared import MessageResponse, build_page, utcnow

logger = logging.getLogger(__name__)


class LectureNotFoundError(NotFoundError):
    def __init__(self, lecture_id: int):
        super().__init__(
            message=f"Lecture {lecture_id} not found",
            error_code="LECTURE_NOT_FOUND",
        )


class InvalidLectureParentError(UnprocessableError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="INVALID_LECTURE_PARENT")


async def _get_lecture_or_404(db: AsyncSession, lecture_id: int) -> Lecture:
    lecture = await repository.get_by_id(db, lecture_id)
    if lecture is None:
        raise LectureNotFoundError(lecture_id)
    return lecture


async def list_lectures(db: AsyncSession, params: LectureListParams) -> dict:
    lectures, total = await repository.list_lectures(
        db,
        offset=params.offset,
        limit=params.limit,
        search=params.search,
        sort_by=params.sort_by.value,
        order=params.order,
    )
    return build_page(lectures, total, params, LectureResponse)


def build_tree(lectures: list[Lecture]) -> list[LectureTreeNode]:
    """
    Nest lectures under their parents.

    A lecture whose parent is not in the list (deleted or missing) becomes
    a root. Sibling order follows the input order.
    """
    nodes = {
        lecture.id: LectureTreeNode.model_validate(lecture, from_attributes=True)
        for lecture in lectures
    }
    roots: list[LectureTreeNode] = []
    for lecture in lectures:
        node = nodes[lecture.id]
        parent = nodes.get(lecture.parent_id) if lecture.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots


async def get_lecture_tree(db: AsyncSession) -> LectureTreeResponse:
    lectures = list(await repository.list_all(db))
    return LectureTreeResponse(data=build_tree(lectures))


async def get_lecture(db: AsyncSession, lecture_id: int) -> Lecture:
    return await _get_lecture_or_404(db, lecture_id)


async def create_lecture(db: AsyncSession, data: CreateLectureRequest) -> Lecture:
    """
    Create a lecture.

    Raises:
        LectureNotFoundError: If parent_id does not name a live lecture
    """
    if data.parent_id is not None:
        await _get_lecture_or_404(db, data.parent_id)

    lecture = await repository.create(
        db,
        parent_id=data.parent_id,
        title=data.title,
        content=data.content,
        media_id=data.media_id,
    )
    await db.commit()

    logger.info(f"Lecture created: {lecture.id} (parent={lecture.parent_id})")
    return lecture


async def _check_parent(db: AsyncSession, lecture_id: int, parent_id: int) -> None:
    """Reject a parent that is the lecture itself or one of its descendants."""
    if parent_id == lecture_id:
        raise InvalidLectureParentError("A lecture cannot be its own parent.")

    await _get_lecture_or_404(db, parent_id)

    parents = await repository.get_parent_ids(db)
    seen: set[int] = set()
    current = parents.get(parent_id)
    while current is not None and current not in seen:
        if current == lecture_id:
            raise InvalidLectureParentError("A lecture cannot be moved under its own descendant.")
        seen.add(current)
        current = parents.get(current)


async def update_lecture(
    db: AsyncSession,
    lecture_id: int,
    data: UpdateLectureRequest,
) -> Lecture:
    """
    Update a lecture.

    Raises:
        LectureNotFoundError: Unknown lecture or unknown parent
        InvalidLectureParentError: The new parent would create a cycle
    """
    lecture = await _get_lecture_or_404(db, lecture_id)

    changes = data.model_dump(exclude_unset=True)
    # title is not nullable; an explicit null means "unchanged"
    if "title" in changes and changes["title"] is None:
        del changes["title"]
    if changes.get("parent_id") is not None:
        await _check_parent(db, lecture_id, changes["parent_id"])

    await repository.update(db, lecture, **changes)
    await db.commit()

    logger.info(f"Lecture updated: {lecture.id} ({sorted(changes)})")
    return lecture


async def delete_lecture(db: AsyncSession, lecture_id: int) -> MessageResponse:
    lecture = await _get_lecture_or_404(db, lecture_id)
    await repository.update(db, lecture, deleted_at=utcnow())
    await db.commit()

    logger.info(f"Lecture soft-deleted: {lecture.id}")
    return MessageResponse(message="Lecture has been deleted")
