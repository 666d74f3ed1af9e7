"""
Unit Test Fixtures.

Fixtures for unit tests - stores and services are mocked or replaced by
in-memory fakes. Unit tests should be fast and isolated, never touching
a real database.
"""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from noteapp.backend.events.broker import ChangeBroker
from noteapp.backend.events.live_query import LiveQuery
from noteapp.backend.events.schemas import NoteUpdated
from noteapp.backend.schemas.note import NoteRead


class FakeNoteService:
    """
    In-memory stand-in for NoteService's live queries.

    Holds a list of notes; change() replaces it and publishes on the
    notes channel so live queries re-run. Records every source requested.
    """

    def __init__(self, broker: ChangeBroker, notes: list[NoteRead] | None = None) -> None:
        self.broker = broker
        self.notes: list[NoteRead] = list(notes or [])
        self.requested: list[str] = []
        self.insert_note = AsyncMock(return_value=1)
        self.update_note = AsyncMock(return_value=None)
        self.delete_note = AsyncMock(return_value=None)
        self.toggle_favorite = AsyncMock(return_value=None)
        self.get_note_by_id = AsyncMock(return_value=None)

    def change(self, notes: list[NoteRead]) -> None:
        self.notes = list(notes)
        self.broker.publish(NoteUpdated(source="test", payload={}), channel="notes")

    def _live(self, name: str, select: Callable[[list[NoteRead]], list[NoteRead]]) -> LiveQuery:
        self.requested.append(name)

        async def fetch() -> list[NoteRead]:
            return select(self.notes)

        return LiveQuery(fetch, self.broker, "notes", name=name)

    def all_notes(self) -> LiveQuery:
        return self._live("all", lambda notes: notes)

    def favorite_notes(self) -> LiveQuery:
        return self._live("favorites", lambda notes: [n for n in notes if n.is_favorite])

    def search_notes(self, query: str) -> LiveQuery:
        return self._live(f"search:{query}", lambda notes: [n for n in notes if n.matches(query)])


@pytest.fixture
def fake_note_service(broker: ChangeBroker) -> FakeNoteService:
    return FakeNoteService(broker)


@pytest.fixture
def mock_theme_repo() -> MagicMock:
    """Mock ThemePreferenceRepository with awaitable read/edit."""
    repo = MagicMock()
    repo.read = AsyncMock()
    repo.edit = AsyncMock()
    return repo
