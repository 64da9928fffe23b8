"""
Profile Service.

Business logic for student profiles. Removing a profile also removes the
ratings it gave, its interest and project links, and the matching
authentication principal, all inside the request's transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import DuplicateError, ResourceInUseError, ValidationError
from notehub.backend.events.schemas import PROFILES, ROLE_ASSIGNMENTS
from notehub.backend.models.profile import Profile
from notehub.backend.repositories.course import CourseRepository
from notehub.backend.repositories.note import NoteRepository
from notehub.backend.repositories.profile import (
    ProfileInterestRepository,
    ProfileProjectRepository,
    ProfileRepository,
)
from notehub.backend.repositories.project import ProjectRepository
from notehub.backend.repositories.rating import RatingRepository
from notehub.backend.repositories.user import UserRepository
from notehub.backend.schemas.profile import ProfileDetailResponse, ProfileResponse, ProfileUpdate
from notehub.backend.services.base import BaseService
from notehub.backend.services.rating import RatingService


class ProfileService(BaseService):
    """Service for profile business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ProfileRepository(session)
        self.interest_repo = ProfileInterestRepository(session)
        self.project_link_repo = ProfileProjectRepository(session)
        self.course_repo = CourseRepository(session)
        self.project_repo = ProjectRepository(session)
        self.note_repo = NoteRepository(session)
        self.rating_repo = RatingRepository(session)
        self.user_repo = UserRepository(session)

    async def add_profile(self, email: str) -> Profile:
        """
        Add a profile holding only an email.

        Raises:
            DuplicateError: If the email already has a profile
        """
        if await self.repo.exists_by_email(email):
            raise DuplicateError(f"A profile for '{email}' already exists.")

        self._log_operation("Adding profile", email=email)
        profile = await self._execute_db_operation(
            "add_profile",
            self.repo.create(email=email, course_interests=[]),
            duplicate_message=f"A profile for '{email}' already exists.",
        )
        self._stage(PROFILES, "added", profile.id, profile, ProfileResponse)
        return profile

    async def update_profile(self, email: str, data: ProfileUpdate) -> ProfileDetailResponse:
        """
        Overwrite a profile's editable fields.

        The five core fields are always written. ``title`` is written when
        given. Interest and project links are reconciled only when their
        lists are given.

        Raises:
            NotFoundError: If no profile for email
            ValidationError: If a course interest or project does not exist
        """
        profile = await self.repo.get_by_email(email)

        problems = {}
        unknown_courses = sorted(
            set(data.course_interests) - await self.course_repo.existing_names(data.course_interests)
        )
        if unknown_courses:
            problems["unknown_courses"] = unknown_courses
        if data.projects is not None:
            unknown_projects = sorted(
                set(data.projects) - await self.project_repo.existing_names(data.projects)
            )
            if unknown_projects:
                problems["unknown_projects"] = unknown_projects
        if problems:
            raise ValidationError("Profile references missing documents", details=problems)

        self._log_operation("Updating profile", email=email)

        fields = {
            "first_name": data.first_name,
            "last_name": data.last_name,
            "bio": data.bio,
            "picture": data.picture,
            "course_interests": list(dict.fromkeys(data.course_interests)),
        }
        if data.title is not None:
            fields["title"] = data.title
        profile = await self.repo.apply(profile, **fields)

        if data.interests is not None:
            added, removed = await self.interest_repo.sync(email, data.interests)
            self._log_debug("Interests reconciled", email=email, added=len(added), removed=len(removed))
        if data.projects is not None:
            added, removed = await self.project_link_repo.sync(email, data.projects)
            self._log_debug("Projects reconciled", email=email, added=len(added), removed=len(removed))

        detail = await self._detail(profile)
        self._stage(PROFILES, "changed", profile.id, detail.model_dump(mode="json"))
        return detail

    async def remove_profile(self, profile_id: str, email: str) -> None:
        """
        Remove a profile and everything that belongs only to it.

        Raises:
            NotFoundError: If the profile does not exist
            ValidationError: If email is not the profile's email
            ResourceInUseError: If the profile still owns notes
        """
        profile = await self.repo.get_by_id(profile_id)
        if profile.email != email:
            raise ValidationError(
                "Email does not match the profile",
                details={"id": profile_id, "email": email},
            )

        owned = await self.note_repo.count_owned_by(email)
        if owned > 0:
            raise ResourceInUseError(
                f"The profile '{email}' still owns notes.",
                details={"notes": owned},
            )

        self._log_operation("Removing profile", profile_id=profile_id, email=email)

        ratings = RatingService(self.session)
        for rating in await self.rating_repo.list_by_owner(email):
            await ratings.retract_rating(rating)

        await self.interest_repo.sync(email, [])
        await self.project_link_repo.sync(email, [])
        await self.repo.remove(profile)
        self._stage(PROFILES, "removed", profile_id)

        user = await self.user_repo.get_by_username_or_none(email)
        if user is None:
            self._logger.warning("No user account for removed profile", extra={"email": email})
            return
        for assignment in user.role_assignments:
            self._stage(ROLE_ASSIGNMENTS, "removed", assignment.id)
        await self.user_repo.remove(user)

    async def get_profile(self, email: str) -> ProfileDetailResponse:
        """
        Raises:
            NotFoundError: If no profile for email
        """
        return await self._detail(await self.repo.get_by_email(email))

    async def _detail(self, profile: Profile) -> ProfileDetailResponse:
        return ProfileDetailResponse(
            **ProfileResponse.model_validate(profile).model_dump(),
            interests=await self.interest_repo.values_for(profile.email),
            projects=await self.project_link_repo.values_for(profile.email),
        )
