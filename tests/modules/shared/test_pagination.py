"""
Unit tests for shared list parameters and the page envelope.
"""

import pytest
from pydantic import BaseModel, ValidationError

from classhub.modules.shared import ListParams, SortOrder, build_page


class Item(BaseModel):
    id: int


class TestListParams:
    def test_defaults(self):
        params = ListParams()
        assert params.page == 1
        assert params.limit == 10
        assert params.order == SortOrder.DESC
        assert params.offset == 0

    def test_offset(self):
        assert ListParams(page=3, limit=20).offset == 40

    @pytest.mark.parametrize("field,value", [("page", 0), ("limit", 0), ("limit", 101)])
    def test_bounds(self, field, value):
        with pytest.raises(ValidationError):
            ListParams(**{field: value})


class TestBuildPage:
    def test_envelope(self):
        page = build_page([{"id": 1}, {"id": 2}], total=21, params=ListParams(limit=10), schema=Item)

        assert page["data"] == [Item(id=1), Item(id=2)]
        assert page["total"] == 21
        assert page["page"] == 1
        assert page["limit"] == 10
        assert page["total_pages"] == 3

    def test_empty(self):
        page = build_page([], total=0, params=ListParams(), schema=Item)
        assert page["data"] == []
        assert page["total_pages"] == 0
