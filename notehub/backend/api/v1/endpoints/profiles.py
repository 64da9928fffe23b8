"""
Profiles API Endpoints.
"""

from fastapi import APIRouter

from notehub.backend.core.dependencies import CurrentUser, DbSession, ensure_owner_or_admin
from notehub.backend.schemas.base import ApiResponse
from notehub.backend.schemas.profile import (
    ProfileCreate,
    ProfileDetailResponse,
    ProfileRemove,
    ProfileResponse,
    ProfileUpdate,
)
from notehub.backend.services.profile import ProfileService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ProfileResponse],
    status_code=201,
    summary="Add a profile",
    description="Add a profile holding only an email. Owner or admin only.",
)
async def add_profile(
    data: ProfileCreate,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[ProfileResponse]:
    ensure_owner_or_admin(user, data.email)
    profile = await ProfileService(db).add_profile(data.email)
    return ApiResponse(data=ProfileResponse.model_validate(profile))


@router.get(
    "/me",
    response_model=ApiResponse[ProfileDetailResponse],
    summary="Own profile",
)
async def get_own_profile(
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[ProfileDetailResponse]:
    return ApiResponse(data=await ProfileService(db).get_profile(user.username))


@router.get(
    "/{email}",
    response_model=ApiResponse[ProfileDetailResponse],
    summary="Get a profile",
)
async def get_profile(
    email: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[ProfileDetailResponse]:
    return ApiResponse(data=await ProfileService(db).get_profile(email))


@router.put(
    "/{email}",
    response_model=ApiResponse[ProfileDetailResponse],
    summary="Update a profile",
    description=(
        "Overwrite a profile's name, bio, picture and course interests. "
        "Interests and projects are reconciled when given. Owner or admin only."
    ),
)
async def update_profile(
    email: str,
    data: ProfileUpdate,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[ProfileDetailResponse]:
    ensure_owner_or_admin(user, email)
    return ApiResponse(data=await ProfileService(db).update_profile(email, data))


@router.post(
    "/remove",
    status_code=204,
    summary="Remove a profile",
    description=(
        "Remove a profile that owns no notes, with its ratings, links and "
        "user account. Owner or admin only."
    ),
)
async def remove_profile(
    data: ProfileRemove,
    db: DbSession,
    user: CurrentUser,
) -> None:
    ensure_owner_or_admin(user, data.email)
    await ProfileService(db).remove_profile(data.id, data.email)
