"""
Note TUI Application.

Textual front end over the note services. The app owns one NoteViewModel
for its whole run and routes between the home screen and the editor.

Usage:
    python cli.py --service tui
    python cli.py --service tui --debug
"""

import asyncio

from textual.app import App
from textual.binding import Binding

from noteapp.backend.core.dependencies import AppContainer, create_container
from noteapp.backend.core.logging import get_logger, log_with_source
from noteapp.backend.events.live_query import Subscription
from noteapp.backend.schemas.theme import ThemePreference
from noteapp.backend.services.theme import ThemeService
from noteapp.tui.navigation import Screen, parse_route
from noteapp.tui.screens import HomeScreen, NoteEditorScreen
from noteapp.tui.theme import DARK_THEME, LIGHT_THEME, detect_system_dark_mode, theme_name

logger = get_logger(__name__)

FATAL_EXIT_DELAY_SECONDS = 3.0


class NoteApp(App[None]):
    """Terminal note-taking app."""

    TITLE = "Notes"

    CSS = """
    #search {
        margin: 0 1;
    }

    #filter-status {
        color: $text-muted;
        padding: 0 2;
    }

    #notes {
        height: 1fr;
        margin: 0 1;
    }

    NoteItem {
        padding: 0 1;
        margin: 0 0 1 0;
        border-left: tall $primary;
    }

    .note-preview {
        color: $text-muted;
    }

    .note-timestamp {
        color: $text-disabled;
    }

    #empty-state {
        height: 1fr;
        content-align: center middle;
        color: $text-muted;
    }

    #editor {
        padding: 1 2;
    }

    #description {
        height: 1fr;
    }

    #title-error {
        color: $error;
    }

    #char-count {
        color: $text-muted;
        text-align: right;
    }

    ConfirmDeleteScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick $error;
        background: $surface;
    }

    #confirm-heading {
        text-style: bold;
    }

    #confirm-buttons {
        height: auto;
        align-horizontal: right;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, container: AppContainer) -> None:
        super().__init__()
        self.container = container
        self.view_model = container.create_note_view_model(error_handler=self.fail)
        self.system_dark = detect_system_dark_mode(
            container.config.application.theme.system_default_dark
        )
        self._theme_subscription: Subscription | None = None
        self._failed = False

    def on_mount(self) -> None:
        self.register_theme(LIGHT_THEME)
        self.register_theme(DARK_THEME)
        self.theme = theme_name(self.system_dark)
        self._theme_subscription = (
            self.container.theme_service.observe_preference().subscribe(self._apply_theme, self.fail)
        )
        self.push_screen(HomeScreen(self.view_model))
        logger.info("TUI started", extra={"system_dark": self.system_dark})

    def on_unmount(self) -> None:
        if self._theme_subscription is not None:
            self._theme_subscription.dispose()
            self._theme_subscription = None

    def _apply_theme(self, preference: ThemePreference) -> None:
        self.theme = theme_name(ThemeService.resolve_dark(preference, self.system_dark))

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def navigate(self, route: str) -> None:
        destination = parse_route(route)
        log_with_source(logger, "tui", "debug", "Navigating", route=route)

        if destination.screen is Screen.HOME:
            while len(self.screen_stack) > 1 and not isinstance(self.screen, HomeScreen):
                self.pop_screen()
            return

        editor = self.container.create_note_editor(self.view_model)
        self.push_screen(NoteEditorScreen(editor, destination.note_id))

    # -------------------------------------------------------------------------
    # Theme menu
    # -------------------------------------------------------------------------

    def change_theme(self, choice: str) -> None:
        self.run_worker(self._change_theme(choice), group="theme", exclusive=True)

    async def _change_theme(self, choice: str) -> None:
        service = self.container.theme_service
        try:
            if choice == "system":
                await service.reset_to_system_theme()
            else:
                await service.set_dark_mode(choice == "dark")
        except Exception as e:
            self.fail(e)

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def fail(self, exc: BaseException) -> None:
        """Show a store failure, then end the app with a non-zero exit code."""
        if self._failed:
            return
        self._failed = True
        logger.error("Fatal application error", extra={"error": str(exc), "type": type(exc).__name__})
        self.notify(str(exc), title="Something went wrong", severity="error", timeout=FATAL_EXIT_DELAY_SECONDS)
        self.set_timer(
            FATAL_EXIT_DELAY_SECONDS,
            lambda: self.exit(return_code=1, message=f"Error: {exc}"),
        )


async def run_tui() -> int:
    """
    Build the application, run the TUI until it exits, then drain writes.

    Returns:
        Process exit code
    """
    container = await create_container()
    app = NoteApp(container)
    try:
        await app.run_async()
    finally:
        drain_seconds = container.config.concurrency.shutdown.drain_seconds
        try:
            await asyncio.wait_for(app.view_model.aclose(), timeout=drain_seconds)
        except TimeoutError:
            logger.warning("Pending writes did not finish before exit", extra={"timeout": drain_seconds})
        await container.aclose()
    return app.return_code or 0
