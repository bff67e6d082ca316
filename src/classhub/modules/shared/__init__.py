"""
Shared module - base models, pagination and common schemas.
"""

from classhub.modules.shared.models import BaseModel, SoftDeleteMixin, enum_values, utcnow
from classhub.modules.shared.pagination import (
    ListParams,
    Page,
    SortOrder,
    apply_ordering,
    build_page,
    search_filter,
)
from classhub.modules.shared.schemas import MessageResponse

__all__ = [
    "BaseModel",
    "SoftDeleteMixin",
    "enum_values",
    "utcnow",
    "ListParams",
    "Page",
    "SortOrder",
    "apply_ordering",
    "build_page",
    "search_filter",
    "MessageResponse",
]
