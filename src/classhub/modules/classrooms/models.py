"""
Classroom Models

Classrooms and their student memberships.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classhub.modules.shared import BaseModel, SoftDeleteMixin

if TYPE_CHECKING:
    from classhub.modules.users.models import User


class Classroom(SoftDeleteMixin, BaseModel):
    """
    A classroom students can ask to join.

    Archived classrooms stay visible to their members but accept no new
    join requests. Deleted classrooms are hidden and can be restored.
    """

    __tablename__ = "classrooms"

    name: Mapped[str] = mapped_column(
        String(200),
        unique=True,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Classroom(id={self.id}, name={self.name})>"


class ClassroomStudent(SoftDeleteMixin, BaseModel):
    """
    Membership of a student in a classroom.

    is_active=False means the student is blocked; deleted_at marks a student
    who left or was removed. One row per (classroom, student) pair; leaving
    and rejoining reuses it.
    """

    __tablename__ = "classroom_students"
    __table_args__ = (UniqueConstraint("classroom_id", "student_id"),)

    classroom_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("classrooms.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    student_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    student: Mapped["User"] = relationship("User", lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<ClassroomStudent(classroom_id={self.classroom_id}, "
            f"student_id={self.student_id}, is_active={self.is_active})>"
        )
