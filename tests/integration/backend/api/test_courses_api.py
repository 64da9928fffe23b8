"""Integration tests for the /api/v1/courses endpoints."""

import pytest
from httpx import AsyncClient


class TestCourses:
    """Tests for the /api/v1/courses endpoints."""

    @pytest.mark.asyncio
    async def test_add_derives_path(self, client: AsyncClient, api, course):
        assert course["name"] == "ICS 311 Algorithms"
        assert course["path"] == "ICS311Algorithms"

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, client: AsyncClient, api, auth_headers, course):
        response = await client.post("/api/v1/courses", json={"name": "ICS 311 Algorithms"}, headers=auth_headers)

        data = api.assert_error(response, 409, "VAL_DUPLICATE")
        assert data["error"]["message"] == "The course 'ICS 311 Algorithms' already exists."

    @pytest.mark.asyncio
    async def test_list_with_note_counts(self, client: AsyncClient, api, auth_headers, note_id):
        await client.post("/api/v1/courses", json={"name": "Networks"}, headers=auth_headers)

        data = api.assert_success(await client.get("/api/v1/courses", headers=auth_headers))["data"]

        assert [(c["name"], c["note_count"]) for c in data] == [
            ("ICS 311 Algorithms", 1),
            ("Networks", 0),
        ]

    @pytest.mark.asyncio
    async def test_detail_by_path_lists_notes(self, client: AsyncClient, api, auth_headers, note_id):
        response = await client.get("/api/v1/courses/ICS311Algorithms", headers=auth_headers)

        data = api.assert_success(response)["data"]
        assert data["name"] == "ICS 311 Algorithms"
        assert [n["id"] for n in data["notes"]] == [note_id]

    @pytest.mark.asyncio
    async def test_unknown_path(self, client: AsyncClient, api, auth_headers):
        response = await client.get("/api/v1/courses/Nowhere", headers=auth_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_remove_requires_admin(self, client: AsyncClient, api, auth_headers, course):
        response = await client.delete(f"/api/v1/courses/{course['id']}", headers=auth_headers)

        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")

    @pytest.mark.asyncio
    async def test_remove_refused_while_notes_filed(
        self, client: AsyncClient, api, admin_headers, course, note_id
    ):
        response = await client.delete(f"/api/v1/courses/{course['id']}", headers=admin_headers)

        data = api.assert_error(response, 409, "VAL_RESOURCE_IN_USE")
        assert data["error"]["message"] == "The course 'ICS 311 Algorithms' still has notes."

    @pytest.mark.asyncio
    async def test_admin_removes_empty_course(self, client: AsyncClient, api, auth_headers, admin_headers, course):
        response = await client.delete(f"/api/v1/courses/{course['id']}", headers=admin_headers)

        assert response.status_code == 204
        api.assert_error(await client.get("/api/v1/courses/ICS311Algorithms", headers=auth_headers), 404)
