"""
Quiz Repository

Database operations for quizzes and their groups, questions and options.
Child rows are removed with bulk statements; callers commit.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.modules.quizzes.models import Quiz, QuizOption, QuizQuestion, QuizQuestionGroup
from classhub.modules.shared import SortOrder, apply_ordering, search_filter

QUIZ_SORT_COLUMNS = {
    "created_at": Quiz.created_at,
    "title": Quiz.title,
}


async def _apply(db: AsyncSession, instance: Any, fields: dict[str, Any]) -> Any:
    for name, value in fields.items():
        setattr(instance, name, value)
    await db.flush()
    return instance


# ============================================
# Quizzes
# ============================================


async def create_quiz(db: AsyncSession, **fields: Any) -> Quiz:
    quiz = Quiz(groups=[], questions=[], **fields)
    db.add(quiz)
    await db.flush()
    return quiz


async def get_quiz(db: AsyncSession, quiz_id: int) -> Quiz | None:
    """Get a live quiz with its groups, questions and options loaded."""
    result = await db.execute(select(Quiz).where(Quiz.id == quiz_id, Quiz.deleted_at.is_(None)))
    return result.scalar_one_or_none()


async def list_quizzes(
    db: AsyncSession,
    *,
    offset: int,
    limit: int,
    search: str | None = None,
    sort_by: str = "created_at",
    order: SortOrder = SortOrder.DESC,
) -> tuple[Sequence[Quiz], int]:
    conditions = [Quiz.deleted_at.is_(None)]
    matches = search_filter(search, Quiz.title)
    if matches is not None:
        conditions.append(matches)

    count_result = await db.execute(select(func.count(Quiz.id)).where(*conditions))
    total = count_result.scalar_one()

    stmt = select(Quiz).where(*conditions)
    stmt = apply_ordering(stmt, QUIZ_SORT_COLUMNS[sort_by], order, Quiz.id)
    result = await db.execute(stmt.offset(offset).limit(limit))

    return result.scalars().all(), total


async def update_quiz(db: AsyncSession, quiz: Quiz, **fields: Any) -> Quiz:
    return await _apply(db, quiz, fields)


# ============================================
# Question groups
# ============================================


async def create_group(db: AsyncSession, *, quiz_id: int, **fields: Any) -> QuizQuestionGroup:
    group = QuizQuestionGroup(quiz_id=quiz_id, **fields)
    db.add(group)
    await db.flush()
    return group


async def get_group(db: AsyncSession, quiz_id: int, group_id: int) -> QuizQuestionGroup | None:
    """Get a group only if it belongs to the quiz."""
    result = await db.execute(
        select(QuizQuestionGroup).where(
            QuizQuestionGroup.id == group_id,
            QuizQuestionGroup.quiz_id == quiz_id,
        )
    )
    return result.scalar_one_or_none()


async def update_group(db: AsyncSession, group: QuizQuestionGroup, **fields: Any) -> QuizQuestionGroup:
    return await _apply(db, group, fields)


async def delete_group(db: AsyncSession, group_id: int) -> int:
    """Ungroup the group's questions, then delete the group. Returns questions ungrouped."""
    result = await db.execute(
        sql_update(QuizQuestion)
        .where(QuizQuestion.group_id == group_id)
        .values(group_id=None)
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        delete(QuizQuestionGroup)
        .where(QuizQuestionGroup.id == group_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


# ============================================
# Questions
# ============================================


async def create_question(db: AsyncSession, *, quiz_id: int, **fields: Any) -> QuizQuestion:
    question = QuizQuestion(quiz_id=quiz_id, options=[], **fields)
    db.add(question)
    await db.flush()
    return question


async def get_question(db: AsyncSession, quiz_id: int, question_id: int) -> QuizQuestion | None:
    """Get a question (with its options) only if it belongs to the quiz."""
    result = await db.execute(
        select(QuizQuestion).where(
            QuizQuestion.id == question_id,
            QuizQuestion.quiz_id == quiz_id,
        )
    )
    return result.scalar_one_or_none()


async def update_question(db: AsyncSession, question: QuizQuestion, **fields: Any) -> QuizQuestion:
    return await _apply(db, question, fields)


async def delete_question(db: AsyncSession, question_id: int) -> int:
    """Delete a question and its options. Returns options deleted."""
    result = await db.execute(
        delete(QuizOption)
        .where(QuizOption.question_id == question_id)
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        delete(QuizQuestion)
        .where(QuizQuestion.id == question_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


# ============================================
# Options
# ============================================


async def create_option(db: AsyncSession, *, question_id: int, **fields: Any) -> QuizOption:
    option = QuizOption(question_id=question_id, **fields)
    db.add(option)
    await db.flush()
    return option


async def get_option(db: AsyncSession, question_id: int, option_id: int) -> QuizOption | None:
    result = await db.execute(
        select(QuizOption).where(
            QuizOption.id == option_id,
            QuizOption.question_id == question_id,
        )
    )
    return result.scalar_one_or_none()


async def count_correct_options(
    db: AsyncSession,
    question_id: int,
    *,
    exclude_option_id: int | None = None,
) -> int:
    stmt = select(func.count(QuizOption.id)).where(
        QuizOption.question_id == question_id,
        QuizOption.is_correct.is_(True),
    )
    if exclude_option_id is not None:
        stmt = stmt.where(QuizOption.id != exclude_option_id)
    result = await db.execute(stmt)
    return result.scalar_one()


async def update_option(db: AsyncSession, option: QuizOption, **fields: Any) -> QuizOption:
    return await _apply(db, option, fields)


async def delete_option(db: AsyncSession, option_id: int) -> int:
    result = await db.execute(
        delete(QuizOption)
        .where(QuizOption.id == option_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
