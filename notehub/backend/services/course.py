"""
Course Service.

Business logic for courses: unique names, derived URL paths, and
refusing to remove a course that notes are still filed under.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import DuplicateError, ResourceInUseError
from notehub.backend.core.utils import strip_whitespace
from notehub.backend.events.schemas import COURSES, PROFILES
from notehub.backend.models.course import Course
from notehub.backend.repositories.course import CourseRepository
from notehub.backend.repositories.note import NoteRepository
from notehub.backend.repositories.profile import ProfileRepository
from notehub.backend.schemas.course import CourseListResponse, CourseResponse
from notehub.backend.services.base import BaseService


class CourseService(BaseService):
    """Service for course business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = CourseRepository(session)
        self.note_repo = NoteRepository(session)
        self.profile_repo = ProfileRepository(session)

    async def add_course(self, name: str) -> Course:
        """
        Add a course. Its path is the name with every whitespace run removed.

        Raises:
            DuplicateError: If a course with exactly this name exists
        """
        if await self.repo.exists_by_name(name):
            raise DuplicateError(f"The course '{name}' already exists.")

        self._log_operation("Adding course", name=name)
        course = await self._execute_db_operation(
            "add_course",
            self.repo.create(name=name, path=strip_whitespace(name)),
            duplicate_message=f"The course '{name}' already exists.",
        )
        self._stage(COURSES, "added", course.id, course, CourseResponse)
        return course

    async def remove_course(self, course_id: str) -> None:
        """
        Remove a course and prune it from every profile's course interests.

        Raises:
            NotFoundError: If the course does not exist
            ResourceInUseError: If any note references the course name
        """
        course = await self.repo.get_by_id(course_id)

        if await self.note_repo.count_in_course(course.name) > 0:
            raise ResourceInUseError(f"The course '{course.name}' still has notes.")

        self._log_operation("Removing course", course_id=course_id, name=course.name)

        for profile in await self.profile_repo.list_interested_in(course.name):
            remaining = [c for c in profile.course_interests if c != course.name]
            await self.profile_repo.apply(profile, course_interests=remaining)
            self._stage(PROFILES, "changed", profile.id, {"course_interests": remaining})

        await self.repo.remove(course)
        self._stage(COURSES, "removed", course_id)

    async def get_course_by_path(self, path: str) -> Course:
        """
        Raises:
            NotFoundError: If no course has this path
        """
        return await self.repo.get_by_path(path)

    async def list_courses(self) -> list[CourseListResponse]:
        """Every course ordered by name, with the number of notes under it."""
        counts = await self.repo.note_counts()
        return [
            CourseListResponse(
                **CourseResponse.model_validate(course).model_dump(),
                note_count=counts.get(course.name, 0),
            )
            for course in await self.repo.list_sorted()
        ]
