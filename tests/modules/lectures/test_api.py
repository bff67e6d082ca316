"""
HTTP tests for the lecture endpoints.
"""

import pytest


async def _create(client, headers, title, parent_id=None, content=None):
    response = await client.post(
        "/api/v1/lectures",
        json={"title": title, "parent_id": parent_id, "content": content},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestLectureAccess:
    @pytest.mark.asyncio
    async def test_students_read_but_cannot_write(
        self, client, admin_headers, student_headers
    ):
        lecture = await _create(client, admin_headers, "Introduction", content="Welcome")

        response = await client.get(f"/api/v1/lectures/{lecture['id']}", headers=student_headers)
        assert response.status_code == 200
        assert response.json()["content"] == "Welcome"

        response = await client.post(
            "/api/v1/lectures", json={"title": "Sneaky"}, headers=student_headers
        )
        assert response.status_code == 403

        response = await client.delete(
            f"/api/v1/lectures/{lecture['id']}", headers=student_headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_anonymous_is_rejected(self, client):
        response = await client.get("/api/v1/lectures")
        assert response.status_code == 401


class TestLectureTree:
    @pytest.mark.asyncio
    async def test_tree_and_list(self, client, admin_headers):
        root = await _create(client, admin_headers, "Algebra", content="long text")
        child = await _create(client, admin_headers, "Equations", parent_id=root["id"])
        await _create(client, admin_headers, "Quadratics", parent_id=child["id"])
        other = await _create(client, admin_headers, "Geometry")

        response = await client.get("/api/v1/lectures/tree", headers=admin_headers)
        assert response.status_code == 200
        roots = response.json()["data"]
        assert [node["title"] for node in roots] == ["Algebra", "Geometry"]
        assert roots[0]["children"][0]["title"] == "Equations"
        assert roots[0]["children"][0]["children"][0]["title"] == "Quadratics"
        assert "content" not in roots[0]

        response = await client.get(
            "/api/v1/lectures", params={"search": "geo"}, headers=admin_headers
        )
        assert [item["id"] for item in response.json()["data"]] == [other["id"]]
        assert "content" not in response.json()["data"][0]

    @pytest.mark.asyncio
    async def test_deleted_parent_promotes_children(self, client, admin_headers):
        root = await _create(client, admin_headers, "Algebra")
        child = await _create(client, admin_headers, "Equations", parent_id=root["id"])

        response = await client.delete(f"/api/v1/lectures/{root['id']}", headers=admin_headers)
        assert response.status_code == 200

        response = await client.get(f"/api/v1/lectures/{root['id']}", headers=admin_headers)
        assert response.status_code == 404

        response = await client.get("/api/v1/lectures/tree", headers=admin_headers)
        assert [node["id"] for node in response.json()["data"]] == [child["id"]]


class TestLectureUpdate:
    @pytest.mark.asyncio
    async def test_moving_under_descendant_is_rejected(self, client, admin_headers):
        root = await _create(client, admin_headers, "Algebra")
        child = await _create(client, admin_headers, "Equations", parent_id=root["id"])
        grandchild = await _create(client, admin_headers, "Quadratics", parent_id=child["id"])

        response = await client.put(
            f"/api/v1/lectures/{root['id']}",
            json={"parent_id": grandchild["id"]},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "INVALID_LECTURE_PARENT"

        response = await client.put(
            f"/api/v1/lectures/{grandchild['id']}",
            json={"parent_id": None, "title": "Quadratic equations"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["parent_id"] is None
        assert response.json()["title"] == "Quadratic equations"

    @pytest.mark.asyncio
    async def test_unknown_parent(self, client, admin_headers):
        response = await client.post(
            "/api/v1/lectures", json={"title": "Orphan", "parent_id": 999}, headers=admin_headers
        )
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "LECTURE_NOT_FOUND"
