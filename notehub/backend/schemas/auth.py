"""
Authentication Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Email and password submitted to sign up or sign in."""

    email: str = Field(
        ...,
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+$",
        description="Email address, used as the username",
        examples=["student@hawaii.edu"],
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Account password",
    )


class TokenResponse(BaseModel):
    """Bearer token issued after sign-up or sign-in."""

    access_token: str
    token_type: str = "bearer"
    username: str
    roles: list[str]


class UserResponse(BaseModel):
    """Schema for the authenticated principal."""

    id: str
    username: str
    roles: list[str]

    model_config = ConfigDict(from_attributes=True)


class RoleAssignmentResponse(BaseModel):
    """Role assignment record, visible only to admins."""

    id: str
    user_id: str
    role: str

    model_config = ConfigDict(from_attributes=True)
