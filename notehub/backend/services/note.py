"""
Note Service.

Business logic layer for notes. Orchestrates repositories,
handles validation, and implements business rules.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import ValidationError
from notehub.backend.events.schemas import NOTES, RATING_SUMMARIES, RATINGS
from notehub.backend.models.note import Note
from notehub.backend.repositories.course import CourseRepository
from notehub.backend.repositories.note import NoteRepository
from notehub.backend.repositories.profile import ProfileRepository
from notehub.backend.repositories.rating import RatingRepository, RatingSummaryRepository
from notehub.backend.schemas.note import NoteCreate, NoteResponse
from notehub.backend.services.base import BaseService
from notehub.backend.services.rating import RatingService


class NoteService(BaseService):
    """
    Service for note business logic.

    A note always references an existing course and an existing owner
    profile, and never outlives its ratings.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.course_repo = CourseRepository(session)
        self.profile_repo = ProfileRepository(session)
        self.rating_repo = RatingRepository(session)
        self.summary_repo = RatingSummaryRepository(session)

    async def add_note(self, data: NoteCreate, owner: str) -> Note:
        """
        Add a note and its zeroed rating summary.

        Args:
            data: Note creation data
            owner: Email of the owning profile

        Returns:
            Created note

        Raises:
            ValidationError: If the course or the owner profile does not exist
        """
        problems = {}
        if not await self.course_repo.exists_by_name(data.course):
            problems["course"] = f"Unknown course '{data.course}'"
        if not await self.profile_repo.exists_by_email(owner):
            problems["owner"] = f"No profile for '{owner}'"
        if problems:
            raise ValidationError("Note references missing documents", details=problems)

        self._log_operation("Adding note", title=data.title, course=data.course, owner=owner)

        note = await self._execute_db_operation(
            "add_note",
            self.repo.create(
                title=data.title,
                course=data.course,
                owner=owner,
                image=data.image,
                description=data.description,
            ),
        )
        self._stage(NOTES, "added", note.id, note, NoteResponse)
        await RatingService(self.session).initialize_summary(note.id)

        self._log_debug("Note added", note_id=note.id)
        return note

    async def remove_note(self, note_id: str) -> None:
        """
        Remove a note with every rating whose note_id matches, and its summary.

        Raises:
            NotFoundError: If note not found
        """
        note = await self.repo.get_by_id(note_id)
        ratings = await self.rating_repo.list_for_note(note_id)

        self._log_operation("Removing note", note_id=note_id, ratings=len(ratings))

        for rating in ratings:
            rating_id = rating.id
            await self.rating_repo.remove(rating)
            self._stage(RATINGS, "removed", rating_id)

        summary = await self.summary_repo.get_for_note(note_id)
        if summary is not None:
            await self.summary_repo.remove(summary)
            self._stage(RATING_SUMMARIES, "removed", note_id)

        await self.repo.remove(note)
        self._stage(NOTES, "removed", note_id)

    async def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def list_notes(
        self,
        course: str | None = None,
        owner: str | None = None,
    ) -> list[Note]:
        """List notes, newest first, optionally by course and/or owner."""
        return await self.repo.list_filtered(course=course, owner=owner)

    async def list_recommended(self, email: str) -> list[Note]:
        """
        Notes filed under the courses a profile is interested in.

        Raises:
            NotFoundError: If no profile for email
        """
        profile = await self.profile_repo.get_by_email(email)
        return await self.repo.list_in_courses(profile.course_interests or [])
