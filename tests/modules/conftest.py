"""
Fixtures for classroom, membership and join request tests.
"""

import pytest

from classhub.modules.classrooms.models import Classroom, ClassroomStudent
from classhub.modules.join_requests.models import JoinRequest, JoinRequestStatus


@pytest.fixture
def make_classroom(session_maker):
    """Factory inserting a classroom."""

    async def _make_classroom(
        name: str = "Algebra I",
        *,
        classroom_id: int | None = None,
        is_archived: bool = False,
    ) -> Classroom:
        async with session_maker() as db:
            classroom = Classroom(name=name, is_archived=is_archived)
            if classroom_id is not None:
                classroom.id = classroom_id
            db.add(classroom)
            await db.commit()
            return classroom

    return _make_classroom


@pytest.fixture
def make_membership(session_maker):
    async def _make_membership(
        classroom_id: int, student_id: int, *, is_active: bool = True
    ) -> ClassroomStudent:
        async with session_maker() as db:
            membership = ClassroomStudent(
                classroom_id=classroom_id, student_id=student_id, is_active=is_active
            )
            db.add(membership)
            await db.commit()
            return membership

    return _make_membership


@pytest.fixture
def make_join_request(session_maker):
    async def _make_join_request(
        classroom_id: int,
        student_id: int,
        status: JoinRequestStatus = JoinRequestStatus.PENDING,
    ) -> JoinRequest:
        async with session_maker() as db:
            join_request = JoinRequest(
                classroom_id=classroom_id, student_id=student_id, status=status
            )
            db.add(join_request)
            await db.commit()
            return join_request

    return _make_join_request
