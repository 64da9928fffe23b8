"""
Rating Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field

MIN_RATING = 1
MAX_RATING = 5


class RatingSubmit(BaseModel):
    """A user's score for a note (the five-star widget)."""

    rating: float = Field(
        ...,
        ge=MIN_RATING,
        le=MAX_RATING,
        description="Score between 1 and 5",
        examples=[4],
    )


class RatingResponse(BaseModel):
    """Per-user rating row in API responses and publications."""

    id: str
    note_id: str
    owner: str
    rating: float

    model_config = ConfigDict(from_attributes=True)


class RatingSummaryResponse(BaseModel):
    """Aggregate running mean of a note."""

    note_id: str
    stars: float
    num_users: int

    model_config = ConfigDict(from_attributes=True)


class RatingStats(BaseModel):
    """Average computed from the per-user rows of a note."""

    note_id: str
    num_ratings: int
    total: float
    average: float
    display_average: float
