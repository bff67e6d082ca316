"""
Quiz Service Layer

Quiz authoring for admins:

1. Quizzes: list, detail, create, update, soft delete
2. Question groups: create, update, delete (member questions are ungrouped)
3. Questions: create, update, delete (options go with them)
4. Options: create, update, delete

Every child is addressed through its parent path; a child that does not
belong to the quiz (or question) in the path is reported as not found.
Single-choice and true/false questions accept at most one correct option.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.exceptions import NotFoundError, UnprocessableError
from classhub.modules.quizzes import repository
from classhub.modules.quizzes.models import (
    QuestionType,
    Quiz,
    QuizOption,
    QuizQuestion,
    QuizQuestionGroup,
)
from classhub.modules.quizzes.schemas import (
    CreateOptionRequest,
    CreateQuestionGroupRequest,
    CreateQuestionRequest,
    CreateQuizRequest,
    QuizListParams,
    QuizResponse,
    UpdateOptionRequest,
    UpdateQuestionGroupRequest,
    UpdateQuestionRequest,
    UpdateQuizRequest,
)
from classhub.modules.shared import MessageResponse, build_page, utcnow

logger = logging.getLogger(__name__)


class QuizNotFoundError(NotFoundError):
    def __init__(self, quiz_id: int):
        super().__init__(message=f"Quiz {quiz_id} not found", error_code="QUIZ_NOT_FOUND")


class QuestionGroupNotFoundError(NotFoundError):
    def __init__(self, group_id: int):
        super().__init__(
            message=f"Question group {group_id} not found",
            error_code="QUESTION_GROUP_NOT_FOUND",
        )


class QuestionNotFoundError(NotFoundError):
    def __init__(self, question_id: int):
        super().__init__(
            message=f"Question {question_id} not found",
            error_code="QUESTION_NOT_FOUND",
        )


class OptionNotFoundError(NotFoundError):
    def __init__(self, option_id: int):
        super().__init__(message=f"Option {option_id} not found", error_code="OPTION_NOT_FOUND")


class InvalidQuestionGroupError(UnprocessableError):
    def __init__(self, group_id: int):
        super().__init__(
            message=f"Question group {group_id} does not belong to this quiz.",
            error_code="INVALID_QUESTION_GROUP",
        )


class MultipleCorrectOptionsError(UnprocessableError):
    def __init__(self, question_type: QuestionType):
        super().__init__(
            message=f"A {question_type.value} question accepts only one correct option.",
            error_code="MULTIPLE_CORRECT_OPTIONS",
        )


def _drop_nulls(changes: dict, *fields: str) -> dict:
    """Remove explicit nulls for non-nullable fields (null means "unchanged")."""
    for field in fields:
        if field in changes and changes[field] is None:
            del changes[field]
    return changes


async def _get_quiz_or_404(db: AsyncSession, quiz_id: int) -> Quiz:
    quiz = await repository.get_quiz(db, quiz_id)
    if quiz is None:
        raise QuizNotFoundError(quiz_id)
    return quiz


async def _get_question_or_404(db: AsyncSession, quiz_id: int, question_id: int) -> QuizQuestion:
    await _get_quiz_or_404(db, quiz_id)
    question = await repository.get_question(db, quiz_id, question_id)
    if question is None:
        raise QuestionNotFoundError(question_id)
    return question


# ============================================
# Quizzes
# ============================================


async def list_quizzes(db: AsyncSession, params: QuizListParams) -> dict:
    quizzes, total = await repository.list_quizzes(
        db,
        offset=params.offset,
        limit=params.limit,
        search=params.search,
        sort_by=params.sort_by.value,
        order=params.order,
    )
    return build_page(quizzes, total, params, QuizResponse)


async def get_quiz(db: AsyncSession, quiz_id: int) -> Quiz:
    return await _get_quiz_or_404(db, quiz_id)


async def create_quiz(db: AsyncSession, data: CreateQuizRequest) -> Quiz:
    quiz = await repository.create_quiz(db, **data.model_dump())
    await db.commit()

    logger.info(f"Quiz created: {quiz.id} - {quiz.title}")
    return quiz


async def update_quiz(db: AsyncSession, quiz_id: int, data: UpdateQuizRequest) -> Quiz:
    quiz = await _get_quiz_or_404(db, quiz_id)
    changes = _drop_nulls(data.model_dump(exclude_unset=True), "title")

    await repository.update_quiz(db, quiz, **changes)
    await db.commit()

    logger.info(f"Quiz updated: {quiz.id} ({sorted(changes)})")
    return quiz


async def delete_quiz(db: AsyncSession, quiz_id: int) -> MessageResponse:
    quiz = await _get_quiz_or_404(db, quiz_id)
    await repository.update_quiz(db, quiz, deleted_at=utcnow())
    await db.commit()

    logger.info(f"Quiz soft-deleted: {quiz.id}")
    return MessageResponse(message="Quiz has been deleted")


# ============================================
# Question groups
# ============================================


async def create_question_group(
    db: AsyncSession,
    quiz_id: int,
    data: CreateQuestionGroupRequest,
) -> QuizQuestionGroup:
    await _get_quiz_or_404(db, quiz_id)
    group = await repository.create_group(db, quiz_id=quiz_id, **data.model_dump())
    await db.commit()

    logger.info(f"Question group created: {group.id} in quiz {quiz_id}")
    return group


async def update_question_group(
    db: AsyncSession,
    quiz_id: int,
    group_id: int,
    data: UpdateQuestionGroupRequest,
) -> QuizQuestionGroup:
    await _get_quiz_or_404(db, quiz_id)
    group = await repository.get_group(db, quiz_id, group_id)
    if group is None:
        raise QuestionGroupNotFoundError(group_id)

    changes = _drop_nulls(data.model_dump(exclude_unset=True), "order_index", "shuffle_inside")
    await repository.update_group(db, group, **changes)
    await db.commit()

    logger.info(f"Question group updated: {group.id} ({sorted(changes)})")
    return group


async def delete_question_group(db: AsyncSession, quiz_id: int, group_id: int) -> MessageResponse:
    """Delete a group; its questions stay in the quiz without a group."""
    await _get_quiz_or_404(db, quiz_id)
    group = await repository.get_group(db, quiz_id, group_id)
    if group is None:
        raise QuestionGroupNotFoundError(group_id)

    ungrouped = await repository.delete_group(db, group_id)
    await db.commit()

    logger.info(f"Question group deleted: {group_id} in quiz {quiz_id} ({ungrouped} questions ungrouped)")
    return MessageResponse(message="Question group has been deleted")


# ============================================
# Questions
# ============================================


async def _check_group(db: AsyncSession, quiz_id: int, group_id: int) -> None:
    if await repository.get_group(db, quiz_id, group_id) is None:
        raise InvalidQuestionGroupError(group_id)


async def create_question(
    db: AsyncSession,
    quiz_id: int,
    data: CreateQuestionRequest,
) -> QuizQuestion:
    """
    Add a question to a quiz.

    Raises:
        QuizNotFoundError: Unknown or deleted quiz
        InvalidQuestionGroupError: group_id names a group of another quiz
    """
    await _get_quiz_or_404(db, quiz_id)
    if data.group_id is not None:
        await _check_group(db, quiz_id, data.group_id)

    question = await repository.create_question(db, quiz_id=quiz_id, **data.model_dump())
    await db.commit()

    logger.info(f"Question created: {question.id} in quiz {quiz_id}")
    return question


async def update_question(
    db: AsyncSession,
    quiz_id: int,
    question_id: int,
    data: UpdateQuestionRequest,
) -> QuizQuestion:
    """
    Update a question.

    Switching to a single-answer type is refused while the question has
    more than one correct option.
    """
    question = await _get_question_or_404(db, quiz_id, question_id)
    changes = _drop_nulls(
        data.model_dump(exclude_unset=True),
        "content",
        "question_type",
        "points",
        "order_index",
    )

    if changes.get("group_id") is not None:
        await _check_group(db, quiz_id, changes["group_id"])

    new_type = changes.get("question_type")
    if new_type is not None and not new_type.allows_multiple_correct:
        if await repository.count_correct_options(db, question.id) > 1:
            raise MultipleCorrectOptionsError(new_type)

    await repository.update_question(db, question, **changes)
    await db.commit()

    logger.info(f"Question updated: {question.id} ({sorted(changes)})")
    return question


async def delete_question(db: AsyncSession, quiz_id: int, question_id: int) -> MessageResponse:
    question = await _get_question_or_404(db, quiz_id, question_id)
    removed_options = await repository.delete_question(db, question.id)
    await db.commit()

    logger.info(f"Question deleted: {question_id} in quiz {quiz_id} ({removed_options} options)")
    return MessageResponse(message="Question has been deleted")


# ============================================
# Options
# ============================================


async def _check_single_correct(
    db: AsyncSession,
    question: QuizQuestion,
    *,
    exclude_option_id: int | None = None,
) -> None:
    if question.question_type.allows_multiple_correct:
        return
    existing = await repository.count_correct_options(
        db, question.id, exclude_option_id=exclude_option_id
    )
    if existing > 0:
        raise MultipleCorrectOptionsError(question.question_type)


async def create_option(
    db: AsyncSession,
    quiz_id: int,
    question_id: int,
    data: CreateOptionRequest,
) -> QuizOption:
    question = await _get_question_or_404(db, quiz_id, question_id)
    if data.is_correct:
        await _check_single_correct(db, question)

    option = await repository.create_option(db, question_id=question.id, **data.model_dump())
    await db.commit()

    logger.info(f"Option created: {option.id} on question {question.id}")
    return option


async def update_option(
    db: AsyncSession,
    quiz_id: int,
    question_id: int,
    option_id: int,
    data: UpdateOptionRequest,
) -> QuizOption:
    question = await _get_question_or_404(db, quiz_id, question_id)
    option = await repository.get_option(db, question.id, option_id)
    if option is None:
        raise OptionNotFoundError(option_id)

    changes = _drop_nulls(data.model_dump(exclude_unset=True), "content", "is_correct", "order_index")
    if changes.get("is_correct"):
        await _check_single_correct(db, question, exclude_option_id=option.id)

    await repository.update_option(db, option, **changes)
    await db.commit()

    logger.info(f"Option updated: {option.id} ({sorted(changes)})")
    return option


async def delete_option(
    db: AsyncSession,
    quiz_id: int,
    question_id: int,
    option_id: int,
) -> MessageResponse:
    question = await _get_question_or_404(db, quiz_id, question_id)
    if await repository.get_option(db, question.id, option_id) is None:
        raise OptionNotFoundError(option_id)

    await repository.delete_option(db, option_id)
    await db.commit()

    logger.info(f"Option deleted: {option_id} on question {question.id}")
    return MessageResponse(message="Option has been deleted")
