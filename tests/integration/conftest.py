"""
Integration Test Fixtures.

The real application, services and publication hub over the in-memory
test database. Each request opens its own session from the test session
factory, so the commit, rollback and post-commit delivery of change deltas
run exactly as in production.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from typing import Any
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notehub.backend.core.database import get_session_factory
from notehub.backend.events.hub import PublicationHub

SignUp = Callable[..., Awaitable[dict[str, str]]]


@pytest.fixture
def app(
    db_session_factory: async_sessionmaker[AsyncSession],
    publication_hub: PublicationHub,
) -> Generator[FastAPI, None, None]:
    # get_db_session looks the factory up per request; WebSocket handlers
    # receive it through the SessionFactory dependency instead
    from notehub.backend.main import create_app

    with patch("notehub.backend.core.database.get_session_factory", return_value=db_session_factory):
        application = create_app()
        application.dependency_overrides[get_session_factory] = lambda: db_session_factory
        yield application
        application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client


class ApiAssertions:
    """Checks for the success and error envelopes."""

    @staticmethod
    def _status(response: Response, expected: int) -> dict[str, Any]:
        assert response.status_code == expected, (
            f"Expected status {expected}, got {response.status_code}: {response.text}"
        )
        return response.json()

    def assert_success(self, response: Response, expected_status: int = 200) -> dict[str, Any]:
        body = self._status(response, expected_status)
        assert body["success"] is True, body
        return body

    def assert_error(
        self,
        response: Response,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        body = self._status(response, expected_status)
        assert body["success"] is False, body
        if expected_code is not None:
            assert body["error"]["code"] == expected_code, body["error"]
        return body

    def assert_validation_error(self, response: Response, field: str | None = None) -> dict[str, Any]:
        """422 VAL_REQUEST_INVALID, optionally naming ``field`` among the failing fields."""
        body = self.assert_error(response, 422, "VAL_REQUEST_INVALID")
        if field is not None:
            fields = [e["field"] for e in body["error"]["details"]["validation_errors"]]
            assert any(field in f for f in fields), f"No validation error for {field!r} in {fields}"
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()


@pytest.fixture
def sign_up(client: AsyncClient) -> SignUp:
    """
    Sign up through the API and return Bearer headers for the new account.

        headers = await sign_up("student@foo.com")
    """

    async def _sign_up(email: str, password: str = "password123") -> dict[str, str]:
        response = await client.post("/api/v1/auth/signup", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}

    return _sign_up


@pytest.fixture
async def auth_headers(sign_up: SignUp) -> dict[str, str]:
    return await sign_up("student@foo.com")


@pytest.fixture
async def admin_headers(sign_up: SignUp) -> dict[str, str]:
    """admin@foo.com is listed in security.admin_emails, so it signs up as admin."""
    return await sign_up("admin@foo.com")


@pytest.fixture
async def course(client: AsyncClient, auth_headers) -> dict:
    response = await client.post("/api/v1/courses", json={"name": "ICS 311 Algorithms"}, headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
async def note_id(client: AsyncClient, auth_headers, course) -> str:
    response = await client.post(
        "/api/v1/notes",
        json={"title": "Sorting", "course": course["name"], "description": "Merge sort and friends"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]
