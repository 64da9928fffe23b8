"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notehub.backend.core.database import get_db_session, get_session_factory
from notehub.backend.core.exceptions import AuthenticationError, AuthorizationError
from notehub.backend.core.logging import get_logger
from notehub.backend.core.security import decode_access_token
from notehub.backend.models.user import User
from notehub.backend.repositories.user import UserRepository

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

# Long-lived connections (WebSockets) open short sessions of their own
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]

bearer_scheme = HTTPBearer(auto_error=False)


async def authenticate_token(session: AsyncSession, token: str | None) -> User:
    """
    Resolve a bearer token to its user.

    Raises:
        AuthenticationError: If the token is missing, invalid, or names no user
    """
    if not token:
        raise AuthenticationError("Authentication required")

    username = decode_access_token(token)
    user = await UserRepository(session).get_by_username_or_none(username)
    if user is None:
        logger.warning("Token for unknown user", extra={"username": username})
        raise AuthenticationError("Invalid or expired token")
    return user


async def get_current_user(
    db: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> User:
    """Get the signed-in user from the Authorization: Bearer header."""
    token = credentials.credentials if credentials else None
    return await authenticate_token(db, token)


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> User:
    """Get the signed-in user, who must hold the admin role."""
    if not user.is_admin:
        raise AuthorizationError("Admin role required")
    return user


AdminUser = Annotated[User, Depends(require_admin)]


def ensure_owner_or_admin(user: User, owner: str) -> None:
    """
    Allow a mutation only to the document's owner or an admin.

    Raises:
        AuthorizationError: If the user is neither
    """
    if user.username != owner and not user.is_admin:
        logger.warning(
            "Mutation refused",
            extra={"username": user.username, "owner": owner},
        )
        raise AuthorizationError("Only the owner or an admin may change this")
