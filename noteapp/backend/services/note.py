"""
Note Service.

Mediates all note reads and writes between the view-models and the note
store. Adds no rules of its own beyond error wrapping and logging.
"""

from functools import partial

from noteapp.backend.core.database import Database
from noteapp.backend.events.live_query import LiveQuery
from noteapp.backend.events.publishers import NoteEventPublisher
from noteapp.backend.repositories.note import NoteRepository
from noteapp.backend.schemas.note import NoteCreate, NoteRead
from noteapp.backend.services.base import BaseService


class NoteService(BaseService):
    """
    Service for note operations.

    Live queries returned here re-run after every note write and raise
    DatabaseError to their subscribers on storage failure.
    """

    def __init__(self, database: Database, publisher: NoteEventPublisher) -> None:
        super().__init__()
        self.repo = NoteRepository(database, publisher)

    def all_notes(self) -> LiveQuery[list[NoteRead]]:
        """Live list of every note, newest first."""
        return self.repo.live(
            self._guarded("list_notes", self.repo.list_all),
            name="notes:all",
        )

    def search_notes(self, query: str) -> LiveQuery[list[NoteRead]]:
        """Live case-insensitive search over title and description."""
        self._log_debug("Searching notes", query=query)
        return self.repo.live(
            self._guarded("search_notes", partial(self.repo.search, query)),
            name=f"notes:search:{query}",
        )

    def favorite_notes(self) -> LiveQuery[list[NoteRead]]:
        """Live list of favorite notes, newest first."""
        return self.repo.live(
            self._guarded("list_favorites", self.repo.list_favorites),
            name="notes:favorites",
        )

    async def get_note_by_id(self, note_id: int) -> NoteRead | None:
        """
        Get a note by ID.

        Returns:
            The note, or None if it does not exist
        """
        return await self._execute_db_operation("get_note", self.repo.get(note_id))

    async def insert_note(self, data: NoteCreate) -> int:
        """
        Store a new note.

        Returns:
            ID assigned by the store
        """
        self._log_operation("Creating note", title=data.title)
        note_id = await self._execute_db_operation("insert_note", self.repo.insert(data))
        self._log_debug("Note created", note_id=note_id)
        return note_id

    async def update_note(self, note: NoteRead) -> None:
        """Replace a stored note; a missing note is ignored."""
        self._log_operation("Updating note", note_id=note.id)
        changed = await self._execute_db_operation("update_note", self.repo.update(note))
        if not changed:
            self._log_debug("Update skipped, note no longer exists", note_id=note.id)

    async def delete_note(self, note: NoteRead) -> None:
        """Delete a note; a missing note is ignored."""
        self._log_operation("Deleting note", note_id=note.id)
        await self._execute_db_operation("delete_note", self.repo.delete(note))

    async def toggle_favorite(self, note_id: int) -> None:
        """Flip a note's favorite flag; a missing note is ignored."""
        self._log_operation("Toggling favorite", note_id=note_id)
        await self._execute_db_operation("toggle_favorite", self.repo.toggle_favorite(note_id))
