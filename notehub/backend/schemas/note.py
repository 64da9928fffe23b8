"""
Note Schemas.

Request bodies for AddNote and the note documents returned by the REST
endpoints and the Notes publication.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    """Schema for creating a new note. The owner is the signed-in user."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title",
        examples=["HW1 solutions"],
    )
    course: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Name of an existing course",
        examples=["Algorithms"],
    )
    image: str | None = Field(
        default=None,
        max_length=2048,
        description="Image URL",
    )
    description: str | None = Field(
        default=None,
        max_length=10000,
        description="Note description",
    )


class NoteCreated(BaseModel):
    """Identifier of a newly created note."""

    id: str


class NoteResponse(BaseModel):
    """Schema for note in API responses and publications."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    course: str = Field(description="Course name")
    owner: str = Field(description="Owner email")
    image: str | None = Field(description="Image URL")
    description: str | None = Field(description="Note description")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)
