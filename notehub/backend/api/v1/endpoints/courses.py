"""
Courses API Endpoints.

REST API endpoints for course management.
"""

from fastapi import APIRouter

from notehub.backend.core.dependencies import AdminUser, CurrentUser, DbSession
from notehub.backend.schemas.base import ApiResponse
from notehub.backend.schemas.course import (
    CourseCreate,
    CourseDetailResponse,
    CourseListResponse,
    CourseResponse,
)
from notehub.backend.schemas.note import NoteResponse
from notehub.backend.services.course import CourseService
from notehub.backend.services.note import NoteService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[CourseResponse],
    status_code=201,
    summary="Add a course",
    description="Add a course. Its URL path is the name without whitespace.",
)
async def add_course(
    data: CourseCreate,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[CourseResponse]:
    """Add a course."""
    service = CourseService(db)
    course = await service.add_course(data.name)
    return ApiResponse(data=CourseResponse.model_validate(course))


@router.get(
    "",
    response_model=ApiResponse[list[CourseListResponse]],
    summary="List courses",
    description="Every course ordered by name, with its note count.",
)
async def list_courses(
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[list[CourseListResponse]]:
    """List courses."""
    service = CourseService(db)
    return ApiResponse(data=await service.list_courses())


@router.get(
    "/{path}",
    response_model=ApiResponse[CourseDetailResponse],
    summary="Get a course by path",
    description="A course and the notes filed under it, newest first.",
)
async def get_course(
    path: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[CourseDetailResponse]:
    """Get a course by its URL path."""
    course = await CourseService(db).get_course_by_path(path)
    notes = await NoteService(db).list_notes(course=course.name)
    return ApiResponse(
        data=CourseDetailResponse(
            **CourseResponse.model_validate(course).model_dump(),
            notes=[NoteResponse.model_validate(note) for note in notes],
        )
    )


@router.delete(
    "/{course_id}",
    status_code=204,
    summary="Remove a course",
    description="Remove a course no note is filed under. Admin only.",
)
async def remove_course(
    course_id: str,
    db: DbSession,
    admin: AdminUser,
) -> None:
    """Remove a course."""
    service = CourseService(db)
    await service.remove_course(course_id)
