"""
Project Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    """
    Schema for adding a project.

    ``interests`` may arrive empty here; the service rejects that with a
    domain validation error so the message matches the other checks.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    homepage: str | None = Field(default=None, max_length=2048)
    picture: str | None = Field(default=None, max_length=2048)
    interests: list[str] = Field(default_factory=list)
    participants: list[str] = Field(default_factory=list, description="Profile emails")


class ProjectResponse(BaseModel):
    """Schema for project in API responses and publications."""

    id: str
    name: str
    description: str | None
    homepage: str | None
    picture: str | None

    model_config = ConfigDict(from_attributes=True)


class ProjectDetailResponse(ProjectResponse):
    """Project together with its interests and participants."""

    interests: list[str] = Field(default_factory=list)
    participants: list[str] = Field(default_factory=list)
