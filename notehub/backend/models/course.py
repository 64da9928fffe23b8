"""
Course Model.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from notehub.backend.models.base import Base, TimestampMixin, UUIDMixin


class Course(UUIDMixin, TimestampMixin, Base):
    """
    A named subject area that notes are filed under.

    ``path`` is the URL slug: the name with all whitespace removed.
    Notes reference a course by name, not by id.
    """

    __tablename__ = "courses"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    path: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, name={self.name!r})>"
