"""
Model registry.

Importing this module registers every table on Base.metadata. Alembic and
the test suite import it before touching the schema.
"""

from classhub.core.database import Base
from classhub.modules.auth.models import OtpCode, RefreshToken
from classhub.modules.classrooms.models import Classroom, ClassroomStudent
from classhub.modules.join_requests.models import JoinRequest
from classhub.modules.lectures.models import Lecture
from classhub.modules.quizzes.models import Quiz, QuizOption, QuizQuestion, QuizQuestionGroup
from classhub.modules.users.models import User

__all__ = [
    "Base",
    "User",
    "OtpCode",
    "RefreshToken",
    "Classroom",
    "ClassroomStudent",
    "JoinRequest",
    "Lecture",
    "Quiz",
    "QuizQuestionGroup",
    "QuizQuestion",
    "QuizOption",
]
