"""
Quizzes Admin Router

All endpoints require the admin role.

Endpoints:
- GET/POST /quizzes, GET/PUT/DELETE /quizzes/{quiz_id}
- POST /quizzes/{quiz_id}/question-groups
- PUT/DELETE /quizzes/{quiz_id}/question-groups/{group_id}
- POST /quizzes/{quiz_id}/questions
- PUT/DELETE /quizzes/{quiz_id}/questions/{question_id}
- POST /quizzes/{quiz_id}/questions/{question_id}/options
- PUT/DELETE /quizzes/{quiz_id}/questions/{question_id}/options/{option_id}
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.auth import require_admin
from classhub.core.database import get_db
from classhub.modules.quizzes import service
from classhub.modules.quizzes.models import Quiz, QuizOption, QuizQuestion, QuizQuestionGroup
from classhub.modules.quizzes.schemas import (
    CreateOptionRequest,
    CreateQuestionGroupRequest,
    CreateQuestionRequest,
    CreateQuizRequest,
    OptionResponse,
    QuestionGroupResponse,
    QuestionResponse,
    QuizDetailResponse,
    QuizListParams,
    QuizResponse,
    UpdateOptionRequest,
    UpdateQuestionGroupRequest,
    UpdateQuestionRequest,
    UpdateQuizRequest,
)
from classhub.modules.shared import MessageResponse, Page

router = APIRouter(dependencies=[Depends(require_admin)])


# ============================================
# Quizzes
# ============================================


@router.get("", response_model=Page[QuizResponse])
async def list_quizzes(
    params: QuizListParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await service.list_quizzes(db, params)


@router.get("/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz(quiz_id: int, db: AsyncSession = Depends(get_db)) -> Quiz:
    """Quiz with groups, and questions with their options."""
    return await service.get_quiz(db, quiz_id)


@router.post("", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
async def create_quiz(data: CreateQuizRequest, db: AsyncSession = Depends(get_db)) -> Quiz:
    return await service.create_quiz(db, data)


@router.put("/{quiz_id}", response_model=QuizResponse)
async def update_quiz(
    quiz_id: int,
    data: UpdateQuizRequest,
    db: AsyncSession = Depends(get_db),
) -> Quiz:
    return await service.update_quiz(db, quiz_id, data)


@router.delete("/{quiz_id}", response_model=MessageResponse)
async def delete_quiz(quiz_id: int, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    return await service.delete_quiz(db, quiz_id)


# ============================================
# Question groups
# ============================================


@router.post(
    "/{quiz_id}/question-groups",
    response_model=QuestionGroupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_question_group(
    quiz_id: int,
    data: CreateQuestionGroupRequest,
    db: AsyncSession = Depends(get_db),
) -> QuizQuestionGroup:
    return await service.create_question_group(db, quiz_id, data)


@router.put("/{quiz_id}/question-groups/{group_id}", response_model=QuestionGroupResponse)
async def update_question_group(
    quiz_id: int,
    group_id: int,
    data: UpdateQuestionGroupRequest,
    db: AsyncSession = Depends(get_db),
) -> QuizQuestionGroup:
    return await service.update_question_group(db, quiz_id, group_id, data)


@router.delete("/{quiz_id}/question-groups/{group_id}", response_model=MessageResponse)
async def delete_question_group(
    quiz_id: int,
    group_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete a group. Its questions remain in the quiz, ungrouped."""
    return await service.delete_question_group(db, quiz_id, group_id)


# ============================================
# Questions
# ============================================


@router.post(
    "/{quiz_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"description": "Group belongs to another quiz"}},
)
async def create_question(
    quiz_id: int,
    data: CreateQuestionRequest,
    db: AsyncSession = Depends(get_db),
) -> QuizQuestion:
    return await service.create_question(db, quiz_id, data)


@router.put("/{quiz_id}/questions/{question_id}", response_model=QuestionResponse)
async def update_question(
    quiz_id: int,
    question_id: int,
    data: UpdateQuestionRequest,
    db: AsyncSession = Depends(get_db),
) -> QuizQuestion:
    return await service.update_question(db, quiz_id, question_id, data)


@router.delete("/{quiz_id}/questions/{question_id}", response_model=MessageResponse)
async def delete_question(
    quiz_id: int,
    question_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    return await service.delete_question(db, quiz_id, question_id)


# ============================================
# Options
# ============================================


@router.post(
    "/{quiz_id}/questions/{question_id}/options",
    response_model=OptionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"description": "Question already has its correct option"}},
)
async def create_option(
    quiz_id: int,
    question_id: int,
    data: CreateOptionRequest,
    db: AsyncSession = Depends(get_db),
) -> QuizOption:
    return await service.create_option(db, quiz_id, question_id, data)


@router.put(
    "/{quiz_id}/questions/{question_id}/options/{option_id}",
    response_model=OptionResponse,
)
async def update_option(
    quiz_id: int,
    question_id: int,
    option_id: int,
    data: UpdateOptionRequest,
    db: AsyncSession = Depends(get_db),
) -> QuizOption:
    return await service.update_option(db, quiz_id, question_id, option_id, data)


@router.delete(
    "/{quiz_id}/questions/{question_id}/options/{option_id}",
    response_model=MessageResponse,
)
async def delete_option(
    quiz_id: int,
    question_id: int,
    option_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    return await service.delete_option(db, quiz_id, question_id, option_id)
