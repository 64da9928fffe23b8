"""
Project Models.

Projects group participating profiles around a set of interests.
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from notehub.backend.models.base import Base, TimestampMixin, UUIDMixin


class Project(UUIDMixin, TimestampMixin, Base):
    """Project database model. Participants are ProfileProject join rows."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    homepage: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    picture: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name!r})>"


class ProjectInterest(UUIDMixin, Base):
    """Join row linking a project to an interest."""

    __tablename__ = "project_interests"
    __table_args__ = (
        UniqueConstraint("project_name", "interest", name="uq_project_interests_pair"),
    )

    project_name: Mapped[str] = mapped_column(
        ForeignKey("projects.name", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    interest: Mapped[str] = mapped_column(String(100), nullable=False)
