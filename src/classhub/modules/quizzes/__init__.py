"""
Quizzes module - quiz authoring: quizzes, question groups, questions and options.
"""

from classhub.modules.quizzes.models import (
    QuestionType,
    Quiz,
    QuizOption,
    QuizQuestion,
    QuizQuestionGroup,
)

__all__ = ["QuestionType", "Quiz", "QuizOption", "QuizQuestion", "QuizQuestionGroup"]
