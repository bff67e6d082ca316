"""
Unit tests for lecture tree building and parent validation.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from classhub.modules.lectures import service
from classhub.modules.lectures.models import Lecture
from classhub.modules.lectures.schemas import CreateLectureRequest, UpdateLectureRequest

SERVICE = "classhub.modules.lectures.service"


def _lecture(lecture_id: int, parent_id: int | None = None, title: str | None = None) -> Lecture:
    now = datetime.now(UTC)
    return Lecture(
        id=lecture_id,
        parent_id=parent_id,
        title=title or f"Lecture {lecture_id}",
        created_at=now,
        updated_at=now,
    )


class TestBuildTree:
    def test_nests_children_under_parents(self):
        lectures = [_lecture(1), _lecture(2, 1), _lecture(3, 1), _lecture(4, 2), _lecture(5)]

        roots = service.build_tree(lectures)

        assert [node.id for node in roots] == [1, 5]
        assert [child.id for child in roots[0].children] == [2, 3]
        assert [child.id for child in roots[0].children[0].children] == [4]
        assert roots[1].children == []

    def test_orphan_becomes_root(self):
        # parent 9 was deleted and is not in the list
        roots = service.build_tree([_lecture(1), _lecture(2, 9)])

        assert [node.id for node in roots] == [1, 2]

    def test_child_listed_before_parent(self):
        roots = service.build_tree([_lecture(2, 1), _lecture(1)])

        assert [node.id for node in roots] == [1]
        assert [child.id for child in roots[0].children] == [2]

    def test_empty(self):
        assert service.build_tree([]) == []


class TestCreateLecture:
    @pytest.mark.asyncio
    async def test_unknown_parent(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock()

            with pytest.raises(service.LectureNotFoundError):
                await service.create_lecture(
                    mock_db, CreateLectureRequest(parent_id=42, title="Intro")
                )

            mock_repo.create.assert_not_awaited()


class TestUpdateLecture:
    @pytest.mark.asyncio
    async def test_own_parent_is_rejected(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=_lecture(1))

            with pytest.raises(service.InvalidLectureParentError) as exc_info:
                await service.update_lecture(mock_db, 1, UpdateLectureRequest(parent_id=1))

            assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_descendant_parent_is_rejected(self, mock_db):
        # 1 -> 2 -> 3; moving 1 under 3 would close a loop
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(side_effect=[_lecture(1), _lecture(3, 2)])
            mock_repo.get_parent_ids = AsyncMock(return_value={1: None, 2: 1, 3: 2})
            mock_repo.update = AsyncMock()

            with pytest.raises(service.InvalidLectureParentError):
                await service.update_lecture(mock_db, 1, UpdateLectureRequest(parent_id=3))

            mock_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_cycle_in_data_terminates(self, mock_db):
        # 5 and 6 point at each other; moving 1 under 5 must not loop forever
        with patch(f"{SERVICE}.repository") as mock_repo:
            lecture = _lecture(1)
            mock_repo.get_by_id = AsyncMock(side_effect=[lecture, _lecture(5, 6)])
            mock_repo.get_parent_ids = AsyncMock(return_value={1: None, 5: 6, 6: 5})
            mock_repo.update = AsyncMock(return_value=lecture)

            await service.update_lecture(mock_db, 1, UpdateLectureRequest(parent_id=5))

            mock_repo.update.assert_awaited_once_with(mock_db, lecture, parent_id=5)

    @pytest.mark.asyncio
    async def test_null_title_is_ignored_and_null_parent_moves_to_top(self, mock_db):
        lecture = _lecture(2, 1)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=lecture)
            mock_repo.update = AsyncMock(return_value=lecture)
            mock_repo.get_parent_ids = AsyncMock()

            await service.update_lecture(
                mock_db, 2, UpdateLectureRequest(title=None, parent_id=None)
            )

            mock_repo.update.assert_awaited_once_with(mock_db, lecture, parent_id=None)
            mock_repo.get_parent_ids.assert_not_awaited()
            mock_db.commit.assert_awaited_once()


class TestDeleteLecture:
    @pytest.mark.asyncio
    async def test_soft_delete(self, mock_db):
        lecture = MagicMock(id=4)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=lecture)
            mock_repo.update = AsyncMock()

            result = await service.delete_lecture(mock_db, 4)

            assert result.message == "Lecture has been deleted"
            assert "deleted_at" in mock_repo.update.call_args.kwargs
