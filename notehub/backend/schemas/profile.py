"""
Profile Schemas.

Pydantic schemas for profile API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProfileCreate(BaseModel):
    """Schema for creating a bare profile."""

    email: str = Field(..., min_length=3, max_length=255, description="Profile email")


class ProfileUpdate(BaseModel):
    """
    Schema for updating a profile.

    ``interests`` and ``projects`` are optional; when given, the profile's
    join rows are reconciled to exactly these values.
    """

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=5000)
    picture: str | None = Field(default=None, max_length=2048)
    course_interests: list[str] = Field(
        default_factory=list,
        description="Names of existing courses",
        examples=[["Algorithms", "Data Structures"]],
    )
    title: str | None = Field(default=None, max_length=255)
    interests: list[str] | None = Field(default=None, description="Free-form interests")
    projects: list[str] | None = Field(default=None, description="Names of existing projects")


class ProfileRemove(BaseModel):
    """Schema identifying a profile to remove."""

    id: str
    email: str


class ProfileResponse(BaseModel):
    """Schema for profile in API responses and publications."""

    id: str
    email: str
    first_name: str | None
    last_name: str | None
    title: str | None
    bio: str | None
    picture: str | None
    course_interests: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileDetailResponse(ProfileResponse):
    """Profile together with its interest and project join rows."""

    interests: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
