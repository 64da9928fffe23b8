"""
Rating Repositories.

Per-user rating rows and the per-note aggregate summary.
"""

from collections.abc import Iterator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.models.rating import Rating, RatingSummary
from notehub.backend.repositories.base import BaseRepository


class RatingRepository(BaseRepository[Rating]):
    """Repository for per-user Rating rows."""

    model = Rating

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_for_owner(self, note_id: str, owner: str) -> Rating | None:
        """Get the rating a given owner gave a note, if any."""
        result = await self.session.execute(
            select(Rating).where(Rating.note_id == note_id, Rating.owner == owner)
        )
        return result.scalar_one_or_none()

    async def list_for_note(self, note_id: str) -> list[Rating]:
        """Get every rating of a note."""
        result = await self.session.execute(
            select(Rating).where(Rating.note_id == note_id).order_by(Rating.created_at)
        )
        return list(result.scalars().all())

    async def list_by_owner(self, owner: str) -> list[Rating]:
        """Get every rating a profile gave."""
        result = await self.session.execute(
            select(Rating).where(Rating.owner == owner)
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[Rating]:
        """Get every rating row, oldest first."""
        result = await self.session.execute(select(Rating).order_by(Rating.created_at))
        return list(result.scalars().all())

    async def iter_values(self, note_id: str) -> Iterator[float]:
        """Get an iterator over the rating values of a note."""
        result = await self.session.execute(
            select(Rating.rating).where(Rating.note_id == note_id)
        )
        return iter(result.scalars())


class RatingSummaryRepository(BaseRepository[RatingSummary]):
    """Repository for the per-note aggregate row, keyed by note_id."""

    model = RatingSummary

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_for_note(self, note_id: str) -> RatingSummary | None:
        """Get a note's summary without locking."""
        result = await self.session.execute(
            select(RatingSummary).where(RatingSummary.note_id == note_id)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, note_id: str) -> RatingSummary | None:
        """
        Get a note's summary and lock the row until the transaction ends.

        Concurrent raters of the same note serialize on this lock, so a
        running-mean update never starts from a stale mean. Backends
        without row locks (SQLite) ignore the FOR UPDATE clause and
        serialize whole write transactions instead.
        """
        result = await self.session.execute(
            select(RatingSummary)
            .where(RatingSummary.note_id == note_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[RatingSummary]:
        """Get every summary row."""
        result = await self.session.execute(select(RatingSummary))
        return list(result.scalars().all())
