"""
Pagination Helpers

Query parameters and response envelope shared by all list endpoints.
"""

import math
from collections.abc import Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field
from sqlalchemy import ColumnElement, Select, or_

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class ListParams(BaseModel):
    """Common list query parameters."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    order: SortOrder = SortOrder.DESC
    search: str | None = Field(default=None, max_length=200)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Page(BaseModel, Generic[T]):
    """Paginated list envelope."""

    data: list[T]
    total: int
    page: int
    limit: int
    total_pages: int


def build_page(
    items: Sequence[Any],
    total: int,
    params: ListParams,
    schema: type[BaseModel],
) -> dict[str, Any]:
    """Assemble the list envelope, converting each row with the response schema."""
    return {
        "data": [schema.model_validate(item) for item in items],
        "total": total,
        "page": params.page,
        "limit": params.limit,
        "total_pages": math.ceil(total / params.limit) if total else 0,
    }


def apply_ordering(
    stmt: Select,
    column: ColumnElement,
    order: SortOrder,
    tiebreaker: ColumnElement,
) -> Select:
    """Order by the column, falling back to the tiebreaker (usually id)."""
    if order == SortOrder.ASC:
        return stmt.order_by(column.asc(), tiebreaker.asc())
    return stmt.order_by(column.desc(), tiebreaker.desc())


def search_filter(term: str | None, *columns: ColumnElement) -> ColumnElement | None:
    """Case-insensitive substring match across the given columns."""
    if not term or not term.strip():
        return None
    pattern = f"%{term.strip()}%"
    return or_(*(column.ilike(pattern) for column in columns))
