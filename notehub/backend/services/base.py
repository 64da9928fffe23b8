"""
Base Service.

Services own the rules that span collections (a note needs its course and
its owner's profile, a course with notes cannot be removed) and stage the
change deltas their writes produce. The deltas are delivered to live
subscribers by the request session once it commits.

    class CourseService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = CourseRepository(session)

        async def add_course(self, name: str) -> Course:
            course = await self._execute_db_operation(
                "add_course",
                self.repo.create(name=name, path=strip_whitespace(name)),
                duplicate_message=f"The course '{name}' already exists.",
            )
            self._stage(COURSES, "added", course.id, course, CourseResponse)
            return course
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notehub.backend.core.exceptions import DatabaseError, DuplicateError
from notehub.backend.core.logging import get_logger
from notehub.backend.events.publishers import stage_change
from notehub.backend.events.schemas import ChangeOperation

T = TypeVar("T")

# Fragments the supported drivers put in unique-violation messages
_UNIQUE_MARKERS = ("unique", "duplicate")


class BaseService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
        duplicate_message: str = "Resource already exists",
    ) -> T:
        """
        Await a repository write, translating driver errors.

        Callers check for duplicates up front; a unique violation here
        means a concurrent request won the race, and is reported exactly
        like the up-front check would have reported it.

        Raises:
            DuplicateError: On a unique constraint violation
            DatabaseError: On any other database failure
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e.orig)},
            )
            if any(marker in str(e).lower() for marker in _UNIQUE_MARKERS):
                raise DuplicateError(duplicate_message)
            raise DatabaseError(f"Database constraint violation: {operation}")
        except SQLAlchemyError as e:
            self._logger.error("Database error", extra={"operation": operation, "error": str(e)})
            raise DatabaseError(f"Database operation failed: {operation}")

    def _stage(
        self,
        collection: str,
        operation: ChangeOperation,
        document_id: str,
        document: Any = None,
        schema: type[BaseModel] | None = None,
    ) -> None:
        """
        Stage a change delta for delivery after commit.

        ``document`` is either a dict of fields or an ORM instance that
        ``schema`` serializes. Removed deltas never carry fields.
        """
        fields = None
        if operation != "removed":
            if isinstance(document, dict):
                fields = document
            elif document is not None and schema is not None:
                fields = schema.model_validate(document).model_dump(mode="json")
        stage_change(self._session, collection, operation, document_id, fields)

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(operation, extra={"service": self.__class__.__name__, **context})

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra={"service": self.__class__.__name__, **context})
