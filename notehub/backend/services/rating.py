"""
Rating Service.

Per-user Rating rows are the record of truth: one row per (note, owner),
updated in place when the same user rates again. Each note also has a
RatingSummary holding the running mean and the number of raters, folded
forward in the same transaction as the row it summarizes.

Running-mean updates:
    first rating     mean' = (mean * n + v) / (n + 1),       n' = n + 1
    re-rating        mean' = (mean * n - old + new) / n,     n' = n
    rating retracted mean' = (mean * n - v) / (n - 1),       n' = n - 1
                     (mean' = 0 when the last rating goes)

The summary row is read with SELECT ... FOR UPDATE, so two users rating
the same note at once serialize on the row instead of both folding into
the same stale mean.
"""

import math
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import DuplicateError, ValidationError
from notehub.backend.events.schemas import RATING_SUMMARIES, RATINGS
from notehub.backend.models.rating import Rating, RatingSummary
from notehub.backend.repositories.note import NoteRepository
from notehub.backend.repositories.profile import ProfileRepository
from notehub.backend.repositories.rating import RatingRepository, RatingSummaryRepository
from notehub.backend.schemas.rating import RatingResponse, RatingStats, RatingSummaryResponse
from notehub.backend.services.base import BaseService


def average_rating(values: Iterable[float]) -> tuple[int, float, float]:
    """
    Count, total and average of rating values in a single pass.

    Works on any iterable, including one-shot iterators.

    Returns:
        Tuple of (count, total, average); average is 0 when count is 0
    """
    count = 0
    total = 0.0
    for value in values:
        count += 1
        total += value
    average = total / count if count > 0 else 0.0
    return count, total, average


def display_rating(average: float) -> float:
    """Round an average to one decimal place, halves rounding up."""
    return math.floor(average * 10 + 0.5) / 10


class RatingService(BaseService):
    """Service for rating business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = RatingRepository(session)
        self.summary_repo = RatingSummaryRepository(session)
        self.note_repo = NoteRepository(session)
        self.profile_repo = ProfileRepository(session)

    async def add_rating(self, note_id: str, owner: str, user_rating: float) -> Rating:
        """
        Record owner's rating of a note, replacing any earlier one.

        Raises:
            NotFoundError: If the note does not exist
            ValidationError: If the owner has no profile
        """
        await self.note_repo.get_by_id(note_id)
        if not await self.profile_repo.exists_by_email(owner):
            raise ValidationError(
                f"No profile for '{owner}'",
                details={"owner": owner},
            )

        existing = await self.repo.get_for_owner(note_id, owner)
        if existing is None:
            self._log_operation("Adding rating", note_id=note_id, owner=owner, rating=user_rating)
            try:
                async with self.session.begin_nested():
                    rating = await self._execute_db_operation(
                        "add_rating",
                        self.repo.create(note_id=note_id, owner=owner, rating=user_rating),
                        duplicate_message=f"'{owner}' has already rated this note",
                    )
            except DuplicateError:
                # A concurrent first rating by the same owner was inserted first
                existing = await self.repo.get_for_owner(note_id, owner)
                if existing is None:
                    raise
                self._log_debug("Concurrent first rating, replacing it", note_id=note_id, owner=owner)
            else:
                self._stage(RATINGS, "added", rating.id, rating, RatingResponse)
                await self.update_rating(note_id, user_rating)
                return rating

        previous = existing.rating
        self._log_operation(
            "Replacing rating", note_id=note_id, owner=owner, previous=previous, rating=user_rating,
        )
        rating = await self.repo.apply(existing, rating=user_rating)
        self._stage(RATINGS, "changed", rating.id, {"rating": rating.rating})
        await self._replace_in_summary(note_id, previous, user_rating)
        return rating

    async def update_rating(self, note_id: str, user_rating: float) -> RatingSummary:
        """Fold one new rater into a note's running mean."""
        summary = await self._locked_summary(note_id)
        count = summary.num_users
        stars = (summary.stars * count + user_rating) / (count + 1)
        return await self._save_summary(summary, stars, count + 1)

    async def initialize_summary(self, note_id: str) -> RatingSummary:
        """Create the zeroed summary row of a new note."""
        summary = await self.summary_repo.create(note_id=note_id, stars=0.0, num_users=0)
        self._stage(RATING_SUMMARIES, "added", note_id, summary, RatingSummaryResponse)
        return summary

    async def retract_rating(self, rating: Rating) -> None:
        """Delete one rating row and take it out of its note's mean."""
        summary = await self._locked_summary(rating.note_id)
        count = summary.num_users
        if count <= 1:
            stars, remaining = 0.0, 0
        else:
            stars = (summary.stars * count - rating.rating) / (count - 1)
            remaining = count - 1

        rating_id = rating.id
        await self.repo.remove(rating)
        self._stage(RATINGS, "removed", rating_id)
        await self._save_summary(summary, stars, remaining)

    async def get_stats(self, note_id: str) -> RatingStats:
        """
        Average of a note's per-user ratings.

        Raises:
            NotFoundError: If the note does not exist
        """
        await self.note_repo.get_by_id(note_id)
        count, total, average = average_rating(await self.repo.iter_values(note_id))
        return RatingStats(
            note_id=note_id,
            num_ratings=count,
            total=total,
            average=average,
            display_average=display_rating(average),
        )

    async def get_own_rating(self, note_id: str, owner: str) -> Rating | None:
        return await self.repo.get_for_owner(note_id, owner)

    async def _replace_in_summary(self, note_id: str, previous: float, user_rating: float) -> RatingSummary:
        summary = await self._locked_summary(note_id)
        count = summary.num_users
        if count == 0:
            return await self._save_summary(summary, user_rating, 1)
        stars = (summary.stars * count - previous + user_rating) / count
        return await self._save_summary(summary, stars, count)

    async def _locked_summary(self, note_id: str) -> RatingSummary:
        summary = await self.summary_repo.get_for_update(note_id)
        if summary is None:
            self._log_debug("Initializing missing rating summary", note_id=note_id)
            summary = await self.initialize_summary(note_id)
        return summary

    async def _save_summary(self, summary: RatingSummary, stars: float, num_users: int) -> RatingSummary:
        summary = await self.summary_repo.apply(summary, stars=stars, num_users=num_users)
        self._stage(
            RATING_SUMMARIES,
            "changed",
            summary.note_id,
            {"stars": summary.stars, "num_users": summary.num_users},
        )
        self._log_debug(
            "Rating summary updated",
            note_id=summary.note_id,
            stars=summary.stars,
            num_users=summary.num_users,
        )
        return summary
