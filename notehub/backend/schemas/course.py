"""
Course Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field

from notehub.backend.schemas.note import NoteResponse


class CourseCreate(BaseModel):
    """Schema for creating a course."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Course name, unique",
        examples=["ICS 311 Algorithms"],
    )


class CourseResponse(BaseModel):
    """Schema for course in API responses and publications."""

    id: str
    name: str
    path: str

    model_config = ConfigDict(from_attributes=True)


class CourseListResponse(CourseResponse):
    """Course with the number of notes filed under it."""

    note_count: int = 0


class CourseDetailResponse(CourseResponse):
    """Course with its notes."""

    notes: list[NoteResponse] = Field(default_factory=list)
