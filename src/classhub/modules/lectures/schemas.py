"""Lecture schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from classhub.modules.shared import ListParams


class LectureSortBy(str, Enum):
    CREATED_AT = "created_at"
    TITLE = "title"


class LectureListParams(ListParams):
    sort_by: LectureSortBy = LectureSortBy.CREATED_AT


class CreateLectureRequest(BaseModel):
    parent_id: int | None = Field(default=None, ge=1)
    title: str = Field(min_length=1, max_length=500)
    content: str | None = None
    media_id: int | None = Field(default=None, ge=1)


class UpdateLectureRequest(BaseModel):
    """Fields left out of the request are not changed; parent_id=null moves to the top level."""

    parent_id: int | None = Field(default=None, ge=1)
    title: str | None = Field(default=None, min_length=1, max_length=500)
    content: str | None = None
    media_id: int | None = Field(default=None, ge=1)


class LectureResponse(BaseModel):
    """Lecture without its content, used in lists and the tree."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    parent_id: int | None = None
    title: str
    media_id: int | None = None
    created_at: datetime
    updated_at: datetime


class LectureDetailResponse(LectureResponse):
    content: str | None = None


class LectureTreeNode(LectureResponse):
    children: list[LectureTreeNode] = Field(default_factory=list)


class LectureTreeResponse(BaseModel):
    data: list[LectureTreeNode]
