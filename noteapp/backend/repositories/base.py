"""
Base Repository.

Base class for all database repositories with common read helpers.
Repositories own no session; each call opens one from the shared
Database, and writes go through Database.transaction().
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select

from noteapp.backend.core.database import Database
from noteapp.backend.core.logging import get_logger
from noteapp.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common read operations.

    Subclasses should set the model class:

        class NoteRepository(BaseRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, database: Database) -> None:
        self.database = database

    async def get_by_id_or_none(self, id: int) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        async with self.database.session() as session:
            result = await session.execute(
                select(self.model).where(self.model.id == id)
            )
            return result.scalar_one_or_none()

    async def count(self) -> int:
        """Get total count of records."""
        async with self.database.session() as session:
            result = await session.execute(
                select(func.count()).select_from(self.model)
            )
            return result.scalar_one()

    async def _fetch_all(self, statement: Select[Any]) -> list[ModelType]:
        """Run a select in a fresh session and return all scalar rows."""
        async with self.database.session() as session:
            result = await session.execute(statement)
            return list(result.scalars().all())
