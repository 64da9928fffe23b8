"""
Course Repository.

Data access layer for courses.
"""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import NotFoundError
from notehub.backend.models.course import Course
from notehub.backend.models.note import Note
from notehub.backend.repositories.base import BaseRepository


class CourseRepository(BaseRepository[Course]):
    """
    Repository for Course model.

    Inherits standard CRUD operations from BaseRepository
    and adds name and path lookups.
    """

    model = Course

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_name_or_none(self, name: str) -> Course | None:
        """Get a course by its exact (case-sensitive) name."""
        result = await self.session.execute(
            select(Course).where(Course.name == name)
        )
        return result.scalar_one_or_none()

    async def exists_by_name(self, name: str) -> bool:
        """Check whether a course with this exact name exists."""
        return await self.get_by_name_or_none(name) is not None

    async def get_by_path(self, path: str) -> Course:
        """
        Get a course by its URL path.

        Paths are not unique ("Data Structures" and "DataStructures"
        share one), so the first course by name wins.

        Raises:
            NotFoundError: If no course has this path
        """
        result = await self.session.execute(
            select(Course).where(Course.path == path).order_by(Course.name).limit(1)
        )
        course = result.scalar_one_or_none()
        if course is None:
            raise NotFoundError(f"Course with path '{path}' not found")
        return course

    async def list_sorted(self) -> list[Course]:
        """Get every course ordered by name."""
        result = await self.session.execute(select(Course).order_by(Course.name))
        return list(result.scalars().all())

    async def existing_names(self, names: Iterable[str]) -> set[str]:
        """Return the subset of names that are existing courses."""
        wanted = set(names)
        if not wanted:
            return set()
        result = await self.session.execute(
            select(Course.name).where(Course.name.in_(wanted))
        )
        return set(result.scalars().all())

    async def note_counts(self) -> dict[str, int]:
        """Get the number of notes filed under each course name."""
        result = await self.session.execute(
            select(Note.course, func.count(Note.id)).group_by(Note.course)
        )
        return {course: count for course, count in result.all()}
