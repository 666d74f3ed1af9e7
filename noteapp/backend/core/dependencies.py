"""
Application Dependencies.

Composition root. Builds the database, the change broker, the stores and
the services once per application run and hands them to the presentation
layer. Nothing here is a module-level singleton; tests build their own
container against temporary files.

Usage:
    container = await create_container()
    view_model = container.create_note_view_model()
    ...
    await container.aclose()
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from noteapp.backend.core.concurrency import shutdown_pools
from noteapp.backend.core.config import (
    AppConfig,
    get_app_config,
    get_database_url,
    get_preferences_path,
)
from noteapp.backend.core.database import Database
from noteapp.backend.core.logging import get_logger
from noteapp.backend.events.broker import ChangeBroker
from noteapp.backend.events.publishers import NoteEventPublisher, PreferenceEventPublisher
from noteapp.backend.events.live_query import ErrorHandler
from noteapp.backend.repositories.preferences import ThemePreferenceRepository
from noteapp.backend.services.note import NoteService
from noteapp.backend.services.theme import ThemeService
from noteapp.backend.viewmodels.editor import EditorState, NoteEditor
from noteapp.backend.viewmodels.notes import NoteViewModel

logger = get_logger(__name__)


@dataclass
class AppContainer:
    """Everything the presentation layer needs, owned for one run."""

    config: AppConfig
    database: Database
    broker: ChangeBroker
    note_service: NoteService
    theme_service: ThemeService

    def create_note_view_model(self, error_handler: ErrorHandler | None = None) -> NoteViewModel:
        return NoteViewModel(
            self.note_service,
            stop_timeout=self.config.application.live_query.stop_timeout_seconds,
            error_handler=error_handler,
        )

    def create_note_editor(
        self,
        view_model: NoteViewModel,
        on_change: Callable[[EditorState], None] | None = None,
    ) -> NoteEditor:
        return NoteEditor(
            view_model,
            error_dismiss_seconds=self.config.application.editor.error_dismiss_seconds,
            on_change=on_change,
        )

    async def aclose(self) -> None:
        await self.database.dispose()
        await shutdown_pools()
        logger.info("Application resources released")


async def create_container(
    config: AppConfig | None = None,
    database_url: str | None = None,
    preferences_path: Path | None = None,
) -> AppContainer:
    """
    Build and initialise the application's object graph.

    Args:
        config: Application configuration. Defaults to get_app_config().
        database_url: Overrides the configured notes database.
        preferences_path: Overrides the configured preference file.
    """
    config = config or get_app_config()
    url = database_url or get_database_url()
    if url.startswith("sqlite+aiosqlite:///") and ":memory:" not in url:
        Path(url.removeprefix("sqlite+aiosqlite:///")).parent.mkdir(parents=True, exist_ok=True)

    database = Database(url, echo=config.database.echo)
    await database.create_all()

    broker = ChangeBroker()
    note_service = NoteService(database, NoteEventPublisher(broker))
    theme_service = ThemeService(
        ThemePreferenceRepository(
            preferences_path or get_preferences_path(),
            PreferenceEventPublisher(broker),
        )
    )

    logger.info(
        "Application container ready",
        extra={"app_name": config.application.name, "database": url},
    )
    return AppContainer(
        config=config,
        database=database,
        broker=broker,
        note_service=note_service,
        theme_service=theme_service,
    )
