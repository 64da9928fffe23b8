"""
Project Service.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import DuplicateError, NotFoundError, ValidationError
from notehub.backend.events.schemas import PROJECTS
from notehub.backend.models.project import Project
from notehub.backend.repositories.profile import ProfileProjectRepository, ProfileRepository
from notehub.backend.repositories.project import ProjectInterestRepository, ProjectRepository
from notehub.backend.schemas.project import ProjectCreate, ProjectDetailResponse, ProjectResponse
from notehub.backend.services.base import BaseService


class ProjectService(BaseService):
    """Service for projects, their interests and their participants."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ProjectRepository(session)
        self.interest_repo = ProjectInterestRepository(session)
        self.participant_repo = ProfileProjectRepository(session)
        self.profile_repo = ProfileRepository(session)

    async def add_project(self, data: ProjectCreate) -> Project:
        """
        Add a project with its interests and participants.

        Raises:
            ValidationError: If there are no interests or a participant has no profile
            DuplicateError: If a project with this name exists
        """
        interests = [i for i in data.interests if i.strip()]
        if not interests:
            raise ValidationError("At least one interest is required")

        if await self.repo.get_by_name_or_none(data.name) is not None:
            raise DuplicateError(f"The project '{data.name}' already exists.")

        unknown = sorted(set(data.participants) - await self.profile_repo.existing_emails(data.participants))
        if unknown:
            raise ValidationError(
                "Participants must have a profile",
                details={"unknown_participants": unknown},
            )

        self._log_operation(
            "Adding project", name=data.name, interests=len(interests), participants=len(data.participants),
        )
        project = await self._execute_db_operation(
            "add_project",
            self.repo.create(
                name=data.name,
                description=data.description,
                homepage=data.homepage,
                picture=data.picture,
            ),
            duplicate_message=f"The project '{data.name}' already exists.",
        )
        await self.interest_repo.sync(project.name, interests)
        await self.participant_repo.sync_participants(project.name, data.participants)

        self._stage(PROJECTS, "added", project.id, await self._detail(project))
        return project

    async def get_project(self, name: str) -> ProjectDetailResponse:
        """
        Raises:
            NotFoundError: If no project has this name
        """
        project = await self.repo.get_by_name_or_none(name)
        if project is None:
            raise NotFoundError(f"Project '{name}' not found")
        return ProjectDetailResponse(**await self._detail(project))

    async def list_projects(self) -> list[ProjectDetailResponse]:
        return [ProjectDetailResponse(**await self._detail(p)) for p in await self.repo.list_sorted()]

    async def _detail(self, project: Project) -> dict:
        return {
            **ProjectResponse.model_validate(project).model_dump(mode="json"),
            "interests": await self.interest_repo.values_for(project.name),
            "participants": await self.participant_repo.participants_of(project.name),
        }
