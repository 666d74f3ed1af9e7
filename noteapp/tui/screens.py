"""
TUI Screens.

HomeScreen lists notes and owns the search box, the favorites filter and
the theme menu. NoteEditorScreen drives a NoteEditor for add and edit.
ConfirmDeleteScreen is the modal shown before a note is deleted.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from rich.text import Text
from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Footer, Header, Input, Label, ListItem, ListView, Static, TextArea

from noteapp.backend.core.exceptions import ApplicationError
from noteapp.backend.core.logging import get_logger
from noteapp.backend.core.utils import format_timestamp
from noteapp.backend.schemas.note import NoteRead
from noteapp.backend.events.live_query import Subscription
from noteapp.backend.viewmodels.editor import EditorState, EditorStatus, NoteEditor
from noteapp.backend.viewmodels.notes import NoteViewModel
from noteapp.tui.navigation import add_note_route, edit_note_route, home_route

if TYPE_CHECKING:
    from noteapp.tui.app import NoteApp

logger = get_logger(__name__)

PREVIEW_LENGTH = 80


def _preview(description: str) -> str:
    first_line = description.strip().splitlines()[0] if description.strip() else ""
    if len(first_line) > PREVIEW_LENGTH:
        return first_line[: PREVIEW_LENGTH - 1] + "…"
    return first_line


class NoteItem(ListItem):
    """One row of the note list."""

    def __init__(self, note: NoteRead) -> None:
        super().__init__()
        self.note = note

    def compose(self) -> ComposeResult:
        title = Text(self.note.title, style="bold")
        if self.note.is_favorite:
            title.append(" ★", style="bold yellow")
        yield Label(title, classes="note-title")
        preview = _preview(self.note.description)
        if preview:
            yield Label(preview, classes="note-preview")
        yield Label(format_timestamp(self.note.timestamp), classes="note-timestamp")


class ConfirmDeleteScreen(ModalScreen[bool]):
    """Ask before deleting a note."""

    BINDINGS = [
        Binding("y", "confirm", "Delete"),
        Binding("n,escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str) -> None:
        super().__init__()
        self._title = title

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label("Delete Note", id="confirm-heading")
            yield Label(f'Are you sure you want to delete "{self._title}"?')
            with Horizontal(id="confirm-buttons"):
                yield Button("Cancel", id="cancel")
                yield Button("Delete", id="delete", variant="error")

    @on(Button.Pressed, "#delete")
    def action_confirm(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#cancel")
    def action_cancel(self) -> None:
        self.dismiss(False)


class HomeScreen(Screen[None]):
    """Note list with search, favorites filter and theme menu."""

    BINDINGS = [
        Binding("a", "add_note", "Add"),
        Binding("f", "toggle_favorite", "Favorite"),
        Binding("x,delete", "delete_note", "Delete"),
        Binding("v", "toggle_filter", "Favorites only"),
        Binding("slash", "focus_search", "Search"),
        Binding("l", "set_theme('light')", "Light"),
        Binding("d", "set_theme('dark')", "Dark"),
        Binding("s", "set_theme('system')", "System theme"),
        Binding("q", "app.quit", "Quit"),
    ]

    app: "NoteApp"

    def __init__(self, view_model: NoteViewModel) -> None:
        super().__init__()
        self.view_model = view_model
        self._subscription: Subscription | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(placeholder="Search notes…", id="search")
        yield Static(id="filter-status")
        yield ListView(id="notes")
        yield Static(id="empty-state")
        yield Footer()

    def on_mount(self) -> None:
        self._render_filter_status()
        self._subscription = self.view_model.observe_notes(self._on_notes)
        self.query_one("#notes", ListView).focus()

    def on_unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

    def _on_notes(self, notes: list[NoteRead]) -> None:
        self._render_notes(notes)

    @work(exclusive=True, group="render-notes")
    async def _render_notes(self, notes: list[NoteRead]) -> None:
        list_view = self.query_one("#notes", ListView)
        highlighted = self._highlighted_note()
        await list_view.clear()
        await list_view.extend(NoteItem(note) for note in notes)
        if notes:
            ids = [note.id for note in notes]
            list_view.index = ids.index(highlighted.id) if highlighted and highlighted.id in ids else 0

        empty = self.query_one("#empty-state", Static)
        empty.display = not notes
        if not notes:
            empty.update(self._empty_message())

    def _empty_message(self) -> str:
        if self.view_model.search_query.strip():
            return "No notes match your search."
        if self.view_model.favorites_only:
            return "No favorite notes yet. Press f on a note to mark it."
        return "No notes yet. Press a to add one."

    def _render_filter_status(self) -> None:
        label = "Showing favorites only" if self.view_model.favorites_only else "Showing all notes"
        self.query_one("#filter-status", Static).update(label)

    def _highlighted_note(self) -> NoteRead | None:
        item = self.query_one("#notes", ListView).highlighted_child
        return item.note if isinstance(item, NoteItem) else None

    @on(Input.Changed, "#search")
    def on_search_changed(self, event: Input.Changed) -> None:
        self.view_model.on_search_query_change(event.value)

    @on(Input.Submitted, "#search")
    def on_search_submitted(self) -> None:
        self.query_one("#notes", ListView).focus()

    @on(ListView.Selected, "#notes")
    def on_note_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, NoteItem):
            self.app.navigate(edit_note_route(event.item.note.id))

    def action_add_note(self) -> None:
        self.app.navigate(add_note_route())

    def action_focus_search(self) -> None:
        self.query_one("#search", Input).focus()

    def action_toggle_filter(self) -> None:
        self.view_model.toggle_favorite_filter()
        self._render_filter_status()

    def action_toggle_favorite(self) -> None:
        note = self._highlighted_note()
        if note is not None:
            self.view_model.toggle_favorite(note.id)

    def action_delete_note(self) -> None:
        note = self._highlighted_note()
        if note is None:
            return

        def on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.view_model.delete_note(note)

        self.app.push_screen(ConfirmDeleteScreen(note.title), on_confirm)

    def action_set_theme(self, choice: str) -> None:
        self.app.change_theme(choice)


class NoteEditorScreen(Screen[None]):
    """Add or edit a single note."""

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("escape", "back", "Back"),
    ]

    app: "NoteApp"

    def __init__(self, editor: NoteEditor, note_id: int | None = None) -> None:
        super().__init__()
        self.editor = editor
        self.editor.on_change = self.render_state
        self.note_id = note_id

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="editor"):
            yield Label("Title")
            yield Input(placeholder="Title", id="title", disabled=True)
            yield Static(id="title-error")
            yield Label("Description")
            yield TextArea(id="description", disabled=True)
            yield Static(id="char-count")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = "Edit Note" if self.note_id is not None else "Add Note"
        self.render_state(self.editor.state)
        self._load()

    def on_unmount(self) -> None:
        self.editor.close()

    @work(exclusive=True, group="editor-load")
    async def _load(self) -> None:
        try:
            state = await self.editor.load(self.note_id)
        except ApplicationError as e:
            self.app.fail(e)
            return

        title = self.query_one("#title", Input)
        description = self.query_one("#description", TextArea)
        title.value = state.title
        description.load_text(state.description)
        title.disabled = False
        description.disabled = False
        if state.status is EditorStatus.EMPTY and self.note_id is not None:
            self.sub_title = "Add Note"
        title.focus()

    def render_state(self, state: EditorState) -> None:
        if not self.is_mounted:
            return
        error = self.query_one("#title-error", Static)
        error.update(state.error or "")
        error.display = state.error is not None
        self.query_one("#char-count", Static).update(state.character_summary)

    @on(Input.Changed, "#title")
    def on_title_changed(self, event: Input.Changed) -> None:
        self.editor.on_title_change(event.value)

    @on(TextArea.Changed, "#description")
    def on_description_changed(self, event: TextArea.Changed) -> None:
        self.editor.on_description_change(event.text_area.text)

    @work(exclusive=True, group="editor-save")
    async def action_save(self) -> None:
        await self._finish(self.editor.save)

    @work(exclusive=True, group="editor-save")
    async def action_back(self) -> None:
        await self._finish(self.editor.back)

    async def _finish(self, step: Callable[[], Awaitable[bool]]) -> None:
        try:
            done = await step()
        except ApplicationError:
            # Already reported through the view-model's error handler
            return
        if done:
            self.app.navigate(home_route())
