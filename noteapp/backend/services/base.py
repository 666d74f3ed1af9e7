"""
Base Service.

Base class for all services providing common patterns for business logic.
Services sit between the presentation layer and the stores: they wrap
storage failures in application exceptions and log operations.

Usage:
    from noteapp.backend.services.base import BaseService

    class NoteService(BaseService):
        def __init__(self, database: Database, publisher: NoteEventPublisher) -> None:
            super().__init__()
            self.repo = NoteRepository(database, publisher)

        async def get_note(self, note_id: int) -> NoteRead | None:
            return await self._execute_db_operation("get_note", self.repo.get(note_id))
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from noteapp.backend.core.exceptions import DatabaseError
from noteapp.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseService:
    """
    Base class for all services.

    Provides:
    - Logging context
    - Error wrapping for database operations

    Subclasses should:
    - Call super().__init__() in their __init__
    - Initialize repositories in __init__
    - Implement business logic methods
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
    ) -> T:
        """
        Execute a database operation with error handling.

        Wraps database operations to convert SQLAlchemy exceptions
        to application-specific exceptions.

        Args:
            operation: Description of the operation for logging
            coro: Coroutine to execute

        Returns:
            Result of the coroutine

        Raises:
            DatabaseError: For any database failure
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _guarded(
        self,
        operation: str,
        fetch: Callable[[], Awaitable[T]],
    ) -> Callable[[], Awaitable[T]]:
        """Wrap a zero-argument read so every call gets database error handling."""

        async def run() -> T:
            return await self._execute_db_operation(operation, fetch())

        return run

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
