"""
Project Repository.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.models.project import Project, ProjectInterest
from notehub.backend.repositories.base import BaseRepository, LinkRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project model."""

    model = Project

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_name_or_none(self, name: str) -> Project | None:
        """Get a project by exact name."""
        result = await self.session.execute(
            select(Project).where(Project.name == name)
        )
        return result.scalar_one_or_none()

    async def existing_names(self, names: Iterable[str]) -> set[str]:
        """Return the subset of names that are existing projects."""
        wanted = set(names)
        if not wanted:
            return set()
        result = await self.session.execute(
            select(Project.name).where(Project.name.in_(wanted))
        )
        return set(result.scalars().all())

    async def list_sorted(self) -> list[Project]:
        """Get every project ordered by name."""
        result = await self.session.execute(select(Project).order_by(Project.name))
        return list(result.scalars().all())


class ProjectInterestRepository(LinkRepository[ProjectInterest]):
    """Join rows between projects and interests."""

    model = ProjectInterest
    key_field = "project_name"
    value_field = "interest"
