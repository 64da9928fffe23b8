"""
Publication Service.

Named read views over the collections. Every authenticated user may read
every document of the user publications; the admin publication exposes
role assignments to admins only and an empty view to everyone else.

A publication yields its full snapshot once. Live subscribers then follow
the collection's change deltas through the PublicationHub.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import NotFoundError
from notehub.backend.events.schemas import (
    COURSES,
    NOTES,
    PROFILES,
    PROJECTS,
    RATING_SUMMARIES,
    RATINGS,
    ROLE_ASSIGNMENTS,
)
from notehub.backend.models.user import User
from notehub.backend.repositories.course import CourseRepository
from notehub.backend.repositories.note import NoteRepository
from notehub.backend.repositories.profile import ProfileRepository
from notehub.backend.repositories.rating import RatingRepository, RatingSummaryRepository
from notehub.backend.repositories.user import UserRepository
from notehub.backend.schemas.auth import RoleAssignmentResponse
from notehub.backend.schemas.course import CourseResponse
from notehub.backend.schemas.note import NoteResponse
from notehub.backend.schemas.profile import ProfileResponse
from notehub.backend.schemas.rating import RatingResponse, RatingSummaryResponse
from notehub.backend.services.base import BaseService
from notehub.backend.services.project import ProjectService


@dataclass(frozen=True)
class Publication:
    """A named, login-gated read view over one collection."""

    name: str
    collection: str
    admin_only: bool = False


PUBLICATIONS: dict[str, Publication] = {
    p.name: p
    for p in (
        Publication("Profiles.publication.user", PROFILES),
        Publication("Courses.publication.user", COURSES),
        Publication("Notes.publication.user", NOTES),
        Publication("Ratings.publication.user", RATINGS),
        Publication("RatingSummaries.publication.user", RATING_SUMMARIES),
        Publication("Projects.publication.user", PROJECTS),
        Publication("Roles.publication.admin", ROLE_ASSIGNMENTS, admin_only=True),
    )
}


def get_publication(name: str) -> Publication:
    """
    Raises:
        NotFoundError: If no publication has this name
    """
    publication = PUBLICATIONS.get(name)
    if publication is None:
        raise NotFoundError(f"Publication '{name}' not found")
    return publication


def can_read(publication: Publication, user: User) -> bool:
    """Whether the user sees documents (and deltas) of the publication."""
    return not publication.admin_only or user.is_admin


class PublicationService(BaseService):
    """Builds publication snapshots."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self._loaders: dict[str, Callable[[], Awaitable[list[dict]]]] = {
            PROFILES: self._dump(ProfileRepository(session).list_all, ProfileResponse),
            COURSES: self._dump(CourseRepository(session).list_sorted, CourseResponse),
            NOTES: self._dump(NoteRepository(session).list_filtered, NoteResponse),
            RATINGS: self._dump(RatingRepository(session).list_all, RatingResponse),
            RATING_SUMMARIES: self._dump(RatingSummaryRepository(session).list_all, RatingSummaryResponse),
            PROJECTS: self._projects,
            ROLE_ASSIGNMENTS: self._dump(UserRepository(session).list_role_assignments, RoleAssignmentResponse),
        }

    async def snapshot(self, name: str, user: User) -> list[dict]:
        """
        Every document of the publication visible to the user.

        Raises:
            NotFoundError: If no publication has this name
        """
        publication = get_publication(name)
        if not can_read(publication, user):
            self._log_debug("Admin publication requested by non-admin", publication=name)
            return []

        documents = await self._loaders[publication.collection]()
        self._log_debug("Publication snapshot built", publication=name, documents=len(documents))
        return documents

    @staticmethod
    def _dump(
        loader: Callable[[], Awaitable[list]],
        schema: type[BaseModel],
    ) -> Callable[[], Awaitable[list[dict]]]:
        async def load() -> list[dict]:
            return [schema.model_validate(row).model_dump(mode="json") for row in await loader()]

        return load

    async def _projects(self) -> list[dict]:
        projects = await ProjectService(self.session).list_projects()
        return [p.model_dump(mode="json") for p in projects]
