"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Tests use a fresh SQLite file under pytest's tmp_path for every test.
    A file rather than :memory: keeps the production engine settings
    (WAL journal, one connection per session) in play.
"""

import asyncio
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest

from noteapp.backend.core.config import get_app_config, get_settings
from noteapp.backend.core.database import Database
from noteapp.backend.events.broker import ChangeBroker
from noteapp.backend.events.publishers import NoteEventPublisher, PreferenceEventPublisher
from noteapp.backend.schemas.note import NoteRead


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    return tmp_path / "notes.db"


@pytest.fixture
async def database(database_path: Path) -> AsyncGenerator[Database, None]:
    """
    Database with the schema created, disposed after the test.

    Usage:
        async def test_something(database: Database):
            async with database.session() as session:
                ...
    """
    db = Database(f"sqlite+aiosqlite:///{database_path}")
    await db.create_all()
    yield db
    await db.dispose()


# =============================================================================
# Event Fixtures
# =============================================================================


@pytest.fixture
def broker() -> ChangeBroker:
    return ChangeBroker()


@pytest.fixture
def note_publisher(broker: ChangeBroker) -> NoteEventPublisher:
    return NoteEventPublisher(broker)


@pytest.fixture
def preference_publisher(broker: ChangeBroker) -> PreferenceEventPublisher:
    return PreferenceEventPublisher(broker)


# =============================================================================
# Note Fixtures
# =============================================================================


@pytest.fixture
def note_factory() -> Callable[..., NoteRead]:
    """Build NoteRead snapshots with sensible defaults."""

    def make_note(
        note_id: int,
        title: str,
        description: str = "",
        is_favorite: bool = False,
        timestamp: int = 0,
    ) -> NoteRead:
        return NoteRead(
            id=note_id,
            title=title,
            description=description,
            is_favorite=is_favorite,
            timestamp=timestamp or 1_700_000_000_000 + note_id,
        )

    return make_note


# =============================================================================
# Async Helpers
# =============================================================================


@pytest.fixture
def wait_until() -> Callable:
    """
    Poll a predicate until it holds, failing the test after a timeout.

    Usage:
        await wait_until(lambda: len(received) == 2)
    """

    async def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        async with asyncio.timeout(timeout):
            while not predicate():
                await asyncio.sleep(0.01)

    return _wait
