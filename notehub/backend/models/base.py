"""
Declarative Base and Column Mixins.

Documents (accounts, courses, notes, profiles, projects, ratings) get a
string UUID ``id`` plus naive-UTC ``created_at``/``updated_at``. Join rows
that only link two documents carry the id alone.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from notehub.backend.core.utils import utc_now


def new_document_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    pass


class UUIDMixin:
    id: Mapped[str] = mapped_column(primary_key=True, default=new_document_id)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    # Bumped by the ORM on every flushed update, e.g. a re-rating
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
