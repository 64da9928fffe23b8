"""
Projects API Endpoints.
"""

from fastapi import APIRouter

from notehub.backend.core.dependencies import CurrentUser, DbSession
from notehub.backend.schemas.base import ApiResponse
from notehub.backend.schemas.project import ProjectCreate, ProjectDetailResponse
from notehub.backend.services.project import ProjectService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ProjectDetailResponse],
    status_code=201,
    summary="Add a project",
    description="Add a project with at least one interest and any number of participants.",
)
async def add_project(
    data: ProjectCreate,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[ProjectDetailResponse]:
    service = ProjectService(db)
    project = await service.add_project(data)
    return ApiResponse(data=await service.get_project(project.name))


@router.get(
    "",
    response_model=ApiResponse[list[ProjectDetailResponse]],
    summary="List projects",
)
async def list_projects(
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[list[ProjectDetailResponse]]:
    return ApiResponse(data=await ProjectService(db).list_projects())


@router.get(
    "/{name}",
    response_model=ApiResponse[ProjectDetailResponse],
    summary="Get a project",
)
async def get_project(
    name: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[ProjectDetailResponse]:
    return ApiResponse(data=await ProjectService(db).get_project(name))
