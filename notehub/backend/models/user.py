"""
User Models.

The authentication principal and its role assignments.
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notehub.backend.models.base import Base, TimestampMixin, UUIDMixin

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(UUIDMixin, TimestampMixin, Base):
    """
    Authentication principal.

    The username is the student's email address and doubles as the
    key of the matching Profile.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role_assignments: Mapped[list["RoleAssignment"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    @property
    def roles(self) -> list[str]:
        return sorted(assignment.role for assignment in self.role_assignments)

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.roles

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"


class RoleAssignment(UUIDMixin, Base):
    """A role held by a user. Exposed only through the admin publication."""

    __tablename__ = "role_assignments"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_role_assignments_user_role"),)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(50), nullable=False)

    user: Mapped[User] = relationship(back_populates="role_assignments")

    def __repr__(self) -> str:
        return f"<RoleAssignment(user_id={self.user_id}, role={self.role!r})>"
