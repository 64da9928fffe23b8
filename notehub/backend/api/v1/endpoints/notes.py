"""
Notes API Endpoints.

REST API endpoints for notes and their ratings.
"""

from fastapi import APIRouter, Query

from notehub.backend.core.dependencies import CurrentUser, DbSession, ensure_owner_or_admin
from notehub.backend.schemas.base import ApiResponse
from notehub.backend.schemas.note import NoteCreate, NoteCreated, NoteResponse
from notehub.backend.schemas.rating import RatingResponse, RatingStats, RatingSubmit
from notehub.backend.services.note import NoteService
from notehub.backend.services.rating import RatingService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[NoteCreated],
    status_code=201,
    summary="Add a note",
    description="Add a note owned by the signed-in user. Returns the new note's id.",
)
async def add_note(
    data: NoteCreate,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NoteCreated]:
    """Add a note."""
    service = NoteService(db)
    note = await service.add_note(data, owner=user.username)
    return ApiResponse(data=NoteCreated(id=note.id))


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="Notes newest first, optionally filtered by course name and owner email.",
)
async def list_notes(
    db: DbSession,
    user: CurrentUser,
    course: str | None = Query(default=None, description="Course name"),
    owner: str | None = Query(default=None, description="Owner email"),
) -> ApiResponse[list[NoteResponse]]:
    """List notes."""
    service = NoteService(db)
    notes = await service.list_notes(course=course, owner=owner)
    return ApiResponse(data=[NoteResponse.model_validate(note) for note in notes])


@router.get(
    "/recommended",
    response_model=ApiResponse[list[NoteResponse]],
    summary="Recommended notes",
    description="Notes filed under the signed-in user's course interests.",
)
async def list_recommended(
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[list[NoteResponse]]:
    """List notes in the caller's courses of interest."""
    service = NoteService(db)
    notes = await service.list_recommended(user.username)
    return ApiResponse(data=[NoteResponse.model_validate(note) for note in notes])


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    service = NoteService(db)
    note = await service.get_note(note_id)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Remove a note",
    description="Remove a note with all of its ratings. Owner or admin only.",
)
async def remove_note(
    note_id: str,
    db: DbSession,
    user: CurrentUser,
) -> None:
    """Remove a note."""
    service = NoteService(db)
    note = await service.get_note(note_id)
    ensure_owner_or_admin(user, note.owner)
    await service.remove_note(note_id)


@router.put(
    "/{note_id}/rating",
    response_model=ApiResponse[RatingResponse],
    summary="Rate a note",
    description="Record the signed-in user's rating, replacing an earlier one.",
)
async def rate_note(
    note_id: str,
    data: RatingSubmit,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[RatingResponse]:
    """Rate a note."""
    service = RatingService(db)
    rating = await service.add_rating(note_id, user.username, data.rating)
    return ApiResponse(data=RatingResponse.model_validate(rating))


@router.get(
    "/{note_id}/rating",
    response_model=ApiResponse[RatingStats],
    summary="Average rating",
    description="Number of ratings, total, average and display average of a note.",
)
async def get_rating(
    note_id: str,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse[RatingStats]:
    """Get a note's average rating."""
    service = RatingService(db)
    return ApiResponse(data=await service.get_stats(note_id))
