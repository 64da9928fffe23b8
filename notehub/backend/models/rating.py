"""
Rating Models.

Per-user rating rows are the record of truth. RatingSummary is the
per-note running mean kept in step with them inside the same transaction.
"""

from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from notehub.backend.models.base import Base, TimestampMixin, UUIDMixin


class Rating(UUIDMixin, TimestampMixin, Base):
    """One score per (note, owner) pair. Re-rating updates the row in place."""

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("note_id", "owner", name="uq_ratings_note_owner"),
    )

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    owner: Mapped[str] = mapped_column(
        ForeignKey("profiles.email", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<Rating(note_id={self.note_id}, owner={self.owner!r}, rating={self.rating})>"


class RatingSummary(Base):
    """Aggregate row: running mean of a note's ratings and how many users rated."""

    __tablename__ = "rating_summaries"

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    stars: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    num_users: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<RatingSummary(note_id={self.note_id}, stars={self.stars}, num_users={self.num_users})>"

