"""
Profile Models.

A student's editable public record plus its interest and project join rows.
"""

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from notehub.backend.models.base import Base, TimestampMixin, UUIDMixin


class Profile(UUIDMixin, TimestampMixin, Base):
    """
    Profile database model.

    Keyed by email. ``course_interests`` holds course names; every name
    must reference an existing Course when the profile is updated.
    """

    __tablename__ = "profiles"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    picture: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    course_interests: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email!r})>"


class ProfileInterest(UUIDMixin, Base):
    """Join row linking a profile to a free-form interest."""

    __tablename__ = "profile_interests"
    __table_args__ = (
        UniqueConstraint("profile_email", "interest", name="uq_profile_interests_pair"),
    )

    profile_email: Mapped[str] = mapped_column(
        ForeignKey("profiles.email", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    interest: Mapped[str] = mapped_column(String(100), nullable=False)


class ProfileProject(UUIDMixin, Base):
    """Join row linking a profile to a project it participates in."""

    __tablename__ = "profile_projects"
    __table_args__ = (
        UniqueConstraint("profile_email", "project_name", name="uq_profile_projects_pair"),
    )

    profile_email: Mapped[str] = mapped_column(
        ForeignKey("profiles.email", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_name: Mapped[str] = mapped_column(
        ForeignKey("projects.name", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
