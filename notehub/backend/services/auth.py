"""
Auth Service.

Sign-up and sign-in for the authentication principal. A user's username
is their email; signing up also creates the matching empty profile.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.config import get_app_config
from notehub.backend.core.exceptions import AuthenticationError, DuplicateError, ValidationError
from notehub.backend.core.security import create_access_token, hash_password, verify_password
from notehub.backend.events.schemas import ROLE_ASSIGNMENTS
from notehub.backend.models.user import ROLE_ADMIN, ROLE_USER, User
from notehub.backend.repositories.user import UserRepository
from notehub.backend.schemas.auth import RoleAssignmentResponse, TokenResponse
from notehub.backend.services.base import BaseService
from notehub.backend.services.profile import ProfileService


class AuthService(BaseService):
    """Service for user accounts and bearer tokens."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)

    async def sign_up(self, email: str, password: str) -> TokenResponse:
        """
        Create a user with the "user" role and an empty profile.

        Emails listed under security.admin_emails also get the "admin" role.

        Raises:
            ValidationError: If the password is shorter than the policy allows
            DuplicateError: If the email is already registered
        """
        config = get_app_config()
        security = config.security
        if len(password) < security.passwords.min_length:
            raise ValidationError(
                "Password too short",
                details={"password": f"Minimum length is {security.passwords.min_length}"},
            )
        if await self.repo.get_by_username_or_none(email) is not None:
            raise DuplicateError(f"The email '{email}' is already registered.")

        self._log_operation("Signing up", username=email)
        user = await self._execute_db_operation(
            "sign_up",
            self.repo.create(username=email, hashed_password=hash_password(password)),
            duplicate_message=f"The email '{email}' is already registered.",
        )

        roles = [ROLE_USER]
        if config.is_admin_email(email):
            roles.append(ROLE_ADMIN)
        for role in roles:
            assignment = await self.repo.add_role(user, role)
            self._stage(ROLE_ASSIGNMENTS, "added", assignment.id, assignment, RoleAssignmentResponse)

        await ProfileService(self.session).add_profile(email)
        return self.issue_token(user)

    async def sign_in(self, email: str, password: str) -> TokenResponse:
        """
        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = await self.repo.get_by_username_or_none(email)
        if user is None or not verify_password(password, user.hashed_password):
            self._logger.warning("Sign-in rejected", extra={"username": email})
            raise AuthenticationError("Invalid email or password")

        self._log_debug("Signed in", username=email)
        return self.issue_token(user)

    def issue_token(self, user: User) -> TokenResponse:
        token = create_access_token(user.username)
        return TokenResponse(access_token=token, username=user.username, roles=user.roles)
