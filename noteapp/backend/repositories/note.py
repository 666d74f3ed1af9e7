"""
Note Repository.

Data access layer for notes. Handles all database operations for the
Note model and exposes live queries that re-run after every write.
"""

from collections.abc import Awaitable, Callable
from functools import partial
from typing import TypeVar

from sqlalchemy import delete, not_, or_, select, update

from noteapp.backend.core.database import Database
from noteapp.backend.events.live_query import LiveQuery
from noteapp.backend.events.publishers import NoteEventPublisher
from noteapp.backend.models.note import Note
from noteapp.backend.repositories.base import BaseRepository
from noteapp.backend.schemas.note import NoteCreate, NoteRead

T = TypeVar("T")

_NEWEST_FIRST = (Note.timestamp.desc(), Note.id.desc())


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Reads return immutable NoteRead snapshots. Every write that changes a
    row publishes a note event after its transaction commits; writes that
    match no row are silent no-ops and publish nothing.
    """

    model = Note

    def __init__(self, database: Database, publisher: NoteEventPublisher) -> None:
        super().__init__(database)
        self.publisher = publisher

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get(self, note_id: int) -> NoteRead | None:
        """Get a note by ID, or None if there is no such note."""
        note = await self.get_by_id_or_none(note_id)
        return NoteRead.model_validate(note) if note is not None else None

    async def list_all(self) -> list[NoteRead]:
        """All notes, newest first."""
        rows = await self._fetch_all(select(Note).order_by(*_NEWEST_FIRST))
        return [NoteRead.model_validate(row) for row in rows]

    async def search(self, query: str) -> list[NoteRead]:
        """
        Notes whose title or description contains query, newest first.

        Matching is case-insensitive; % and _ in query match literally.
        """
        rows = await self._fetch_all(
            select(Note)
            .where(
                or_(
                    Note.title.icontains(query, autoescape=True),
                    Note.description.icontains(query, autoescape=True),
                )
            )
            .order_by(*_NEWEST_FIRST)
        )
        return [NoteRead.model_validate(row) for row in rows]

    async def list_favorites(self) -> list[NoteRead]:
        """Favorite notes, newest first."""
        rows = await self._fetch_all(
            select(Note)
            .where(Note.is_favorite == True)  # noqa: E712
            .order_by(*_NEWEST_FIRST)
        )
        return [NoteRead.model_validate(row) for row in rows]

    # -------------------------------------------------------------------------
    # Live queries
    # -------------------------------------------------------------------------

    def live(self, fetch: Callable[[], Awaitable[T]], name: str = "") -> LiveQuery[T]:
        """Bind a read to the notes change channel."""
        return LiveQuery(fetch, self.publisher.broker, self.publisher.CHANNEL, name=name)

    def observe_all(self) -> LiveQuery[list[NoteRead]]:
        """Live list of all notes."""
        return self.live(self.list_all, name="notes:all")

    def observe_search(self, query: str) -> LiveQuery[list[NoteRead]]:
        """Live substring search."""
        return self.live(partial(self.search, query), name=f"notes:search:{query}")

    def observe_favorites(self) -> LiveQuery[list[NoteRead]]:
        """Live list of favorites."""
        return self.live(self.list_favorites, name="notes:favorites")

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def insert(self, data: NoteCreate) -> int:
        """
        Store a note and return its ID.

        A note without an ID gets a fresh one. A note with an ID replaces
        any stored row with that ID.
        """
        row = Note(
            id=data.id,
            title=data.title,
            description=data.description,
            is_favorite=data.is_favorite,
            timestamp=data.timestamp,
        )
        async with self.database.transaction() as session:
            if data.id is None:
                session.add(row)
            else:
                row = await session.merge(row)
            await session.flush()
            note_id = row.id

        self.publisher.note_created(note_id, data.title)
        return note_id

    async def update(self, note: NoteRead) -> bool:
        """
        Replace the stored row with the same ID.

        Returns:
            True if a row was replaced, False if the note no longer exists
        """
        async with self.database.transaction() as session:
            result = await session.execute(
                update(Note)
                .where(Note.id == note.id)
                .values(
                    title=note.title,
                    description=note.description,
                    is_favorite=note.is_favorite,
                    timestamp=note.timestamp,
                )
            )
            changed = result.rowcount > 0

        if changed:
            self.publisher.note_updated(note.id)
        return changed

    async def delete(self, note: NoteRead) -> bool:
        """
        Delete the note with the same ID.

        Returns:
            True if a row was deleted, False if it was already gone
        """
        async with self.database.transaction() as session:
            result = await session.execute(delete(Note).where(Note.id == note.id))
            changed = result.rowcount > 0

        if changed:
            self.publisher.note_deleted(note.id)
        return changed

    async def toggle_favorite(self, note_id: int) -> bool:
        """
        Flip the favorite flag in a single UPDATE statement.

        Returns:
            True if the note exists and was toggled
        """
        async with self.database.transaction() as session:
            result = await session.execute(
                update(Note)
                .where(Note.id == note_id)
                .values(is_favorite=not_(Note.is_favorite))
            )
            changed = result.rowcount > 0

        if changed:
            self.publisher.note_favorite_toggled(note_id)
        return changed
