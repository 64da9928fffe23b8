"""
Note Model.

A shared study artifact filed under a course and owned by a profile.
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notehub.backend.models.base import Base, TimestampMixin, UUIDMixin


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    ``course`` references Course.name and ``owner`` references
    Profile.email. Both foreign keys restrict deletion of the parent
    while notes still point at it.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    course: Mapped[str] = mapped_column(
        ForeignKey("courses.name", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    owner: Mapped[str] = mapped_column(
        ForeignKey("profiles.email", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    image: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
