"""Quiz schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from classhub.modules.quizzes.models import QuestionType
from classhub.modules.shared import ListParams


class QuizSortBy(str, Enum):
    CREATED_AT = "created_at"
    TITLE = "title"


class QuizListParams(ListParams):
    sort_by: QuizSortBy = QuizSortBy.CREATED_AT


# ============================================
# Requests
# ============================================


class CreateQuizRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    time_limit_minutes: int | None = Field(default=None, ge=1, le=1440)


class UpdateQuizRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    time_limit_minutes: int | None = Field(default=None, ge=1, le=1440)


class CreateQuestionGroupRequest(BaseModel):
    title: str | None = Field(default=None, max_length=500)
    intro_text: str | None = None
    order_index: int = Field(default=0, ge=0)
    shuffle_inside: bool = False


class UpdateQuestionGroupRequest(BaseModel):
    title: str | None = Field(default=None, max_length=500)
    intro_text: str | None = None
    order_index: int | None = Field(default=None, ge=0)
    shuffle_inside: bool | None = None


class CreateQuestionRequest(BaseModel):
    group_id: int | None = Field(default=None, ge=1)
    content: str = Field(min_length=1)
    explanation: str | None = None
    question_type: QuestionType = QuestionType.SINGLE_CHOICE
    points: float = Field(default=1.0, gt=0)
    order_index: int = Field(default=0, ge=0)


class UpdateQuestionRequest(BaseModel):
    """group_id=null moves the question out of its group."""

    group_id: int | None = Field(default=None, ge=1)
    content: str | None = Field(default=None, min_length=1)
    explanation: str | None = None
    question_type: QuestionType | None = None
    points: float | None = Field(default=None, gt=0)
    order_index: int | None = Field(default=None, ge=0)


class CreateOptionRequest(BaseModel):
    content: str = Field(min_length=1)
    is_correct: bool = False
    order_index: int = Field(default=0, ge=0)


class UpdateOptionRequest(BaseModel):
    content: str | None = Field(default=None, min_length=1)
    is_correct: bool | None = None
    order_index: int | None = Field(default=None, ge=0)


# ============================================
# Responses
# ============================================


class QuizResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    time_limit_minutes: int | None = None
    created_at: datetime
    updated_at: datetime


class QuestionGroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quiz_id: int
    title: str | None = None
    intro_text: str | None = None
    order_index: int
    shuffle_inside: bool


class OptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question_id: int
    content: str
    is_correct: bool
    order_index: int


class QuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quiz_id: int
    group_id: int | None = None
    content: str
    explanation: str | None = None
    question_type: QuestionType
    points: float
    order_index: int
    options: list[OptionResponse] = Field(default_factory=list)


class QuizDetailResponse(QuizResponse):
    """Quiz with its groups and questions, each ordered by order_index."""

    groups: list[QuestionGroupResponse]
    questions: list[QuestionResponse]
