"""
User Repository.

Data access for authentication principals and their role assignments.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.models.user import RoleAssignment, User
from notehub.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_username_or_none(self, username: str) -> User | None:
        """Get a user by username, returning None if absent."""
        result = await self.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def add_role(self, user: User, role: str) -> RoleAssignment:
        """Assign a role to a user."""
        assignment = RoleAssignment(user_id=user.id, role=role)
        self.session.add(assignment)
        await self.session.flush()
        await self.session.refresh(user, attribute_names=["role_assignments"])
        return assignment

    async def list_role_assignments(self) -> list[RoleAssignment]:
        """Get every role assignment, ordered by user then role."""
        result = await self.session.execute(
            select(RoleAssignment).order_by(RoleAssignment.user_id, RoleAssignment.role)
        )
        return list(result.scalars().all())
