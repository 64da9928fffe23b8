"""
Profile Repository.

Data access for profiles and their interest/project join rows.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import NotFoundError
from notehub.backend.models.profile import Profile, ProfileInterest, ProfileProject
from notehub.backend.repositories.base import BaseRepository, LinkRepository


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile model."""

    model = Profile

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_email(self, email: str) -> Profile:
        """
        Get a profile by email.

        Raises:
            NotFoundError: If no profile has this email
        """
        profile = await self.get_by_email_or_none(email)
        if profile is None:
            raise NotFoundError(f"Profile '{email}' not found")
        return profile

    async def get_by_email_or_none(self, email: str) -> Profile | None:
        """Get a profile by email, returning None if absent."""
        result = await self.session.execute(
            select(Profile).where(Profile.email == email)
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check whether a profile exists for the email."""
        result = await self.session.execute(
            select(Profile.id).where(Profile.email == email)
        )
        return result.scalar_one_or_none() is not None

    async def existing_emails(self, emails: Iterable[str]) -> set[str]:
        """Return the subset of emails that have a profile."""
        wanted = set(emails)
        if not wanted:
            return set()
        result = await self.session.execute(
            select(Profile.email).where(Profile.email.in_(wanted))
        )
        return set(result.scalars().all())

    async def list_all(self) -> list[Profile]:
        """Get every profile ordered by email."""
        result = await self.session.execute(select(Profile).order_by(Profile.email))
        return list(result.scalars().all())

    async def list_interested_in(self, course_name: str) -> list[Profile]:
        """
        Get the profiles whose course interests include a course.

        Course interests are a JSON list, so the membership test runs
        in Python to stay portable across database backends.
        """
        profiles = await self.list_all()
        return [p for p in profiles if course_name in (p.course_interests or [])]


class ProfileInterestRepository(LinkRepository[ProfileInterest]):
    """Join rows between profiles and interests."""

    model = ProfileInterest
    key_field = "profile_email"
    value_field = "interest"


class ProfileProjectRepository(LinkRepository[ProfileProject]):
    """Join rows between profiles and the projects they take part in."""

    model = ProfileProject
    key_field = "profile_email"
    value_field = "project_name"

    async def participants_of(self, project_name: str) -> list[str]:
        """Get the emails of a project's participants, sorted."""
        result = await self.session.execute(
            select(ProfileProject.profile_email)
            .where(ProfileProject.project_name == project_name)
        )
        return sorted(result.scalars().all())

    async def sync_participants(self, project_name: str, emails: Iterable[str]) -> tuple[set[str], set[str]]:
        """Reconcile a project's participant rows (the reverse direction of sync)."""
        return await self._sync("project_name", "profile_email", project_name, emails)
