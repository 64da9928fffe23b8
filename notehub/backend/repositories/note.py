"""
Note Repository.

Queries over notes: by course, by owner, by a set of course names (the
recommended feed) and note counts per course.
"""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.models.note import Note
from notehub.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """Notes point at their course by name and their owner by email; filters match those keys."""

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_filtered(
        self,
        course: str | None = None,
        owner: str | None = None,
    ) -> list[Note]:
        """
        Get notes, optionally restricted to a course and/or an owner.

        Args:
            course: Course name to match exactly
            owner: Owner email to match exactly

        Returns:
            Notes ordered newest first
        """
        query = select(Note)
        if course is not None:
            query = query.where(Note.course == course)
        if owner is not None:
            query = query.where(Note.owner == owner)

        result = await self.session.execute(query.order_by(Note.created_at.desc()))
        return list(result.scalars().all())

    async def list_in_courses(self, courses: Iterable[str]) -> list[Note]:
        """Get the notes filed under any of the given course names."""
        wanted = list(courses)
        if not wanted:
            return []
        result = await self.session.execute(
            select(Note)
            .where(Note.course.in_(wanted))
            .order_by(Note.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_in_course(self, course: str) -> int:
        """Get the number of notes referencing a course name."""
        result = await self.session.execute(
            select(func.count()).select_from(Note).where(Note.course == course)
        )
        return result.scalar_one()

    async def count_owned_by(self, owner: str) -> int:
        """Get the number of notes owned by a profile email."""
        result = await self.session.execute(
            select(func.count()).select_from(Note).where(Note.owner == owner)
        )
        return result.scalar_one()
