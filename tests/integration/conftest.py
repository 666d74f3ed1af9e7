"""
Integration Test Fixtures.

Real stores over a temporary SQLite file and a temporary preference file.
Database and broker fixtures come from the root conftest.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from noteapp.backend.core.database import Database
from noteapp.backend.events.publishers import NoteEventPublisher, PreferenceEventPublisher
from noteapp.backend.repositories.note import NoteRepository
from noteapp.backend.repositories.preferences import ThemePreferenceRepository
from noteapp.backend.services.note import NoteService
from noteapp.backend.services.theme import ThemeService
from noteapp.backend.viewmodels.notes import NoteViewModel


@pytest.fixture
def note_repo(database: Database, note_publisher: NoteEventPublisher) -> NoteRepository:
    return NoteRepository(database, note_publisher)


@pytest.fixture
def note_service(database: Database, note_publisher: NoteEventPublisher) -> NoteService:
    return NoteService(database, note_publisher)


@pytest.fixture
def preferences_path(tmp_path: Path) -> Path:
    return tmp_path / "prefs" / "theme_prefs.json"


@pytest.fixture
def theme_repo(
    preferences_path: Path,
    preference_publisher: PreferenceEventPublisher,
) -> ThemePreferenceRepository:
    return ThemePreferenceRepository(preferences_path, preference_publisher)


@pytest.fixture
def theme_service(theme_repo: ThemePreferenceRepository) -> ThemeService:
    return ThemeService(theme_repo)


@pytest.fixture
async def note_view_model(note_service: NoteService) -> AsyncGenerator[NoteViewModel, None]:
    view_model = NoteViewModel(note_service, stop_timeout=0)
    yield view_model
    await view_model.aclose()
