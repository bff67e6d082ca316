"""
Lecture Models
"""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from classhub.modules.shared import BaseModel, SoftDeleteMixin


class Lecture(SoftDeleteMixin, BaseModel):
    """
    A node in the lecture tree.

    parent_id is null for top-level lectures. A lecture whose parent is
    deleted is shown at the top level until it is moved.
    """

    __tablename__ = "lectures"

    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("lectures.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    media_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Lecture(id={self.id}, parent_id={self.parent_id}, title={self.title})>"
