"""
Base Repositories.

Repositories hold the queries for one table and nothing else; rules that
span collections live in the services. Every write flushes, so ids,
defaults and constraint violations surface inside the service call that
caused them rather than at commit.
"""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import NotFoundError
from notehub.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Id-keyed access to one document table.

        class CourseRepository(BaseRepository[Course]):
            model = Course
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: str) -> ModelType:
        """
        Raises:
            NotFoundError: "<Model> not found", e.g. "Note not found"
        """
        instance = await self.session.get(self.model, id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def create(self, **fields: Any) -> ModelType:
        instance = self.model(**fields)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def apply(self, instance: ModelType, **fields: Any) -> ModelType:
        """Set columns on a loaded document and flush. Unknown names are ignored."""
        for key, value in fields.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def remove(self, instance: ModelType) -> None:
        await self.session.delete(instance)
        await self.session.flush()


class LinkRepository(BaseRepository[ModelType]):
    """
    Repository for join rows linking a keyed owner to string values.

    Subclasses name the two columns:

        class ProjectInterestRepository(LinkRepository[ProjectInterest]):
            model = ProjectInterest
            key_field = "project_name"
            value_field = "interest"
    """

    key_field: str
    value_field: str

    async def values_for(self, key: str) -> list[str]:
        """Get the linked values for one owner, sorted."""
        result = await self.session.execute(
            select(getattr(self.model, self.value_field))
            .where(getattr(self.model, self.key_field) == key)
        )
        return sorted(result.scalars().all())

    async def sync(self, key: str, values: Iterable[str]) -> tuple[set[str], set[str]]:
        """
        Reconcile the links of one owner with the wanted values.

        Only missing rows are inserted and only stale rows deleted, so
        rows that stay linked are never touched.

        Returns:
            Tuple of (added values, removed values)
        """
        return await self._sync(self.key_field, self.value_field, key, values)

    async def _sync(
        self,
        key_field: str,
        value_field: str,
        key: str,
        values: Iterable[str],
    ) -> tuple[set[str], set[str]]:
        result = await self.session.execute(
            select(self.model).where(getattr(self.model, key_field) == key)
        )
        existing = {getattr(row, value_field): row for row in result.scalars().all()}
        wanted = set(values)

        added = wanted - existing.keys()
        removed = existing.keys() - wanted

        for value in removed:
            await self.session.delete(existing[value])
        for value in sorted(added):
            self.session.add(self.model(**{key_field: key, value_field: value}))

        await self.session.flush()
        return added, removed
