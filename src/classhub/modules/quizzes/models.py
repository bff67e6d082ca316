"""
Quiz Models

A quiz holds ordered question groups and questions; each question holds its
answer options. Groups are optional: a question with group_id null stands on
its own.
"""

from enum import Enum

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classhub.modules.shared import BaseModel, SoftDeleteMixin, enum_values


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"

    @property
    def allows_multiple_correct(self) -> bool:
        return self is QuestionType.MULTIPLE_CHOICE


class Quiz(SoftDeleteMixin, BaseModel):
    __tablename__ = "quizzes"

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    time_limit_minutes: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    groups: Mapped[list["QuizQuestionGroup"]] = relationship(
        "QuizQuestionGroup",
        lazy="selectin",
        order_by="[QuizQuestionGroup.order_index, QuizQuestionGroup.id]",
    )
    questions: Mapped[list["QuizQuestion"]] = relationship(
        "QuizQuestion",
        lazy="selectin",
        order_by="[QuizQuestion.order_index, QuizQuestion.id]",
    )

    def __repr__(self) -> str:
        return f"<Quiz(id={self.id}, title={self.title})>"


class QuizQuestionGroup(BaseModel):
    """A titled block of questions, optionally shuffled when presented."""

    __tablename__ = "quiz_question_groups"

    quiz_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )
    intro_text: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    order_index: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    shuffle_inside: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<QuizQuestionGroup(id={self.id}, quiz_id={self.quiz_id})>"


class QuizQuestion(BaseModel):
    __tablename__ = "quiz_questions"

    quiz_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    group_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("quiz_question_groups.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    explanation: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    question_type: Mapped[QuestionType] = mapped_column(
        SAEnum(QuestionType, name="question_type", values_callable=enum_values),
        default=QuestionType.SINGLE_CHOICE,
        nullable=False,
    )
    points: Mapped[float] = mapped_column(
        Float,
        default=1.0,
        nullable=False,
    )
    order_index: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    options: Mapped[list["QuizOption"]] = relationship(
        "QuizOption",
        lazy="selectin",
        order_by="[QuizOption.order_index, QuizOption.id]",
    )

    def __repr__(self) -> str:
        return (
            f"<QuizQuestion(id={self.id}, quiz_id={self.quiz_id}, "
            f"type={self.question_type.value})>"
        )


class QuizOption(BaseModel):
    __tablename__ = "quiz_options"

    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("quiz_questions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    is_correct: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    order_index: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<QuizOption(id={self.id}, question_id={self.question_id})>"
