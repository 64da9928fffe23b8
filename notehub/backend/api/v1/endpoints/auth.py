"""
Auth API Endpoints.

Sign-up, sign-in and the current principal.
"""

from fastapi import APIRouter

from notehub.backend.core.dependencies import CurrentUser, DbSession
from notehub.backend.schemas.auth import Credentials, TokenResponse, UserResponse
from notehub.backend.schemas.base import ApiResponse
from notehub.backend.services.auth import AuthService

router = APIRouter()


@router.post(
    "/signup",
    response_model=ApiResponse[TokenResponse],
    status_code=201,
    summary="Sign up",
    description="Create an account and its empty profile, and return a bearer token.",
)
async def sign_up(
    data: Credentials,
    db: DbSession,
) -> ApiResponse[TokenResponse]:
    service = AuthService(db)
    token = await service.sign_up(data.email, data.password)
    return ApiResponse(data=token)


@router.post(
    "/signin",
    response_model=ApiResponse[TokenResponse],
    summary="Sign in",
    description="Exchange an email and password for a bearer token.",
)
async def sign_in(
    data: Credentials,
    db: DbSession,
) -> ApiResponse[TokenResponse]:
    service = AuthService(db)
    token = await service.sign_in(data.email, data.password)
    return ApiResponse(data=token)


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Current user",
)
async def me(user: CurrentUser) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.model_validate(user))
