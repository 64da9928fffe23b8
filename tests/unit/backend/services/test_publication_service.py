"""
Unit Tests for Publication Service.
"""

import pytest
from unittest.mock import MagicMock

from notehub.backend.core.exceptions import NotFoundError
from notehub.backend.schemas.note import NoteCreate
from notehub.backend.schemas.project import ProjectCreate
from notehub.backend.services.auth import AuthService
from notehub.backend.services.course import CourseService
from notehub.backend.services.note import NoteService
from notehub.backend.services.project import ProjectService
from notehub.backend.services.publication import (
    PUBLICATIONS,
    PublicationService,
    can_read,
    get_publication,
)
from notehub.backend.services.rating import RatingService


def _user(is_admin: bool = False) -> MagicMock:
    user = MagicMock()
    user.is_admin = is_admin
    return user


class TestPublicationRegistry:
    """Tests for publication lookup and visibility."""

    def test_every_collection_has_a_publication(self):
        collections = {p.collection for p in PUBLICATIONS.values()}

        assert collections == {
            "profiles",
            "courses",
            "notes",
            "ratings",
            "rating_summaries",
            "projects",
            "role_assignments",
        }

    def test_unknown_name_raises_not_found(self):
        with pytest.raises(NotFoundError):
            get_publication("Secrets.publication.user")

    def test_admin_publication_visibility(self):
        roles = get_publication("Roles.publication.admin")

        assert can_read(roles, _user(is_admin=True)) is True
        assert can_read(roles, _user(is_admin=False)) is False

    def test_user_publication_visible_to_everyone(self):
        notes = get_publication("Notes.publication.user")

        assert can_read(notes, _user(is_admin=False)) is True


class TestPublicationSnapshot:
    """Tests for snapshot contents."""

    @pytest.fixture
    async def seeded(self, db_session):
        await AuthService(db_session).sign_up("admin@foo.com", "password123")
        await AuthService(db_session).sign_up("student@foo.com", "password123")
        await CourseService(db_session).add_course("Algorithms")
        await NoteService(db_session).add_note(
            NoteCreate(title="Sorting", course="Algorithms"), owner="student@foo.com",
        )
        await ProjectService(db_session).add_project(
            ProjectCreate(name="Notehub", interests=["Web"], participants=["student@foo.com"]),
        )
        return PublicationService(db_session)

    @pytest.mark.asyncio
    async def test_role_assignments_for_admin(self, seeded):
        documents = await seeded.snapshot("Roles.publication.admin", _user(is_admin=True))

        assert sorted(d["role"] for d in documents) == ["admin", "user", "user"]

    @pytest.mark.asyncio
    async def test_role_assignments_empty_for_non_admin(self, seeded):
        assert await seeded.snapshot("Roles.publication.admin", _user()) == []

    @pytest.mark.asyncio
    async def test_user_publications_return_every_document(self, seeded):
        user = _user()

        profiles = await seeded.snapshot("Profiles.publication.user", user)
        notes = await seeded.snapshot("Notes.publication.user", user)
        summaries = await seeded.snapshot("RatingSummaries.publication.user", user)
        projects = await seeded.snapshot("Projects.publication.user", user)

        assert [p["email"] for p in profiles] == ["admin@foo.com", "student@foo.com"]
        assert [n["title"] for n in notes] == ["Sorting"]
        assert summaries[0]["num_users"] == 0
        assert projects[0]["participants"] == ["student@foo.com"]

    @pytest.mark.asyncio
    async def test_documents_are_json_ready(self, seeded):
        [note] = await seeded.snapshot("Notes.publication.user", _user())

        assert isinstance(note["created_at"], str)

    @pytest.mark.asyncio
    async def test_unknown_publication(self, seeded):
        with pytest.raises(NotFoundError):
            await seeded.snapshot("Nope", _user())

    @pytest.mark.asyncio
    async def test_ratings_publication(self, db_session, seeded):
        [note] = await seeded.snapshot("Notes.publication.user", _user())
        await RatingService(db_session).add_rating(note["id"], "admin@foo.com", 4)

        ratings = await seeded.snapshot("Ratings.publication.user", _user())

        assert [(r["note_id"], r["owner"], r["rating"]) for r in ratings] == [(note["id"], "admin@foo.com", 4.0)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", sorted(PUBLICATIONS))
    async def test_every_publication_builds(self, seeded, name):
        assert isinstance(await seeded.snapshot(name, _user(is_admin=True)), list)
