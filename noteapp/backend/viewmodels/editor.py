"""
Note Editor View-Model.

State machine behind the create/edit screen:

    load(None)                  → EMPTY
    load(id), note found        → LOADING → POPULATED
    load(id), note missing      → LOADING → EMPTY (saving creates a note)

save() with a blank title shows "Title cannot be empty" instead of
writing. The message clears on the next title edit or after a fixed delay;
showing it again restarts the delay. save() with a title writes, waits for
the write and returns True so the screen can navigate back. back() saves
first whenever the title is not blank.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from noteapp.backend.core.logging import get_logger
from noteapp.backend.core.utils import now_millis
from noteapp.backend.schemas.note import NoteRead
from noteapp.backend.viewmodels.notes import NoteViewModel

logger = get_logger(__name__)

EMPTY_TITLE_ERROR = "Title cannot be empty"


class EditorStatus(str, Enum):
    LOADING = "loading"
    POPULATED = "populated"
    EMPTY = "empty"


@dataclass(frozen=True)
class EditorState:
    status: EditorStatus = EditorStatus.LOADING
    title: str = ""
    description: str = ""
    existing_note: NoteRead | None = None
    error: str | None = None

    @property
    def is_editing(self) -> bool:
        return self.existing_note is not None

    @property
    def character_summary(self) -> str:
        return f"{len(self.title)} / {len(self.description)} characters"


class NoteEditor:
    """Create/edit flow for a single note."""

    def __init__(
        self,
        view_model: NoteViewModel,
        error_dismiss_seconds: float = 2.0,
        on_change: Callable[[EditorState], None] | None = None,
    ) -> None:
        self._view_model = view_model
        self._error_dismiss_seconds = error_dismiss_seconds
        self.on_change = on_change
        self._state = EditorState()
        self._dismiss_handle: asyncio.TimerHandle | None = None
        self._write: asyncio.Task[Any] | None = None

    @property
    def state(self) -> EditorState:
        return self._state

    def _set(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        if self.on_change is not None:
            self.on_change(self._state)

    async def load(self, note_id: int | None) -> EditorState:
        """Populate the editor for a new note (None) or an existing one."""
        if note_id is None:
            self._set(status=EditorStatus.EMPTY)
            return self._state

        self._set(status=EditorStatus.LOADING)
        note = await self._view_model.get_note_by_id(note_id)
        if note is None:
            logger.info("Note to edit not found", extra={"note_id": note_id})
            self._set(status=EditorStatus.EMPTY)
        else:
            self._set(
                status=EditorStatus.POPULATED,
                title=note.title,
                description=note.description,
                existing_note=note,
            )
        return self._state

    def on_title_change(self, title: str) -> None:
        self._cancel_dismiss()
        self._set(title=title, error=None)

    def on_description_change(self, description: str) -> None:
        self._set(description=description)

    async def save(self) -> bool:
        """
        Validate and write the note.

        Returns:
            True when the note was written and the screen should close
        """
        if self._state.status is EditorStatus.LOADING:
            return False
        if self._write is not None:
            # One write per editor; a repeated save waits on the first one
            await asyncio.shield(self._write)
            return True

        title = self._state.title
        if not title.strip():
            self._show_error()
            return False

        existing = self._state.existing_note
        if existing is not None:
            task = self._view_model.update_note(
                existing.model_copy(update={
                    "title": title.strip(),
                    "description": self._state.description.strip(),
                    "timestamp": now_millis(),
                })
            )
        else:
            task = self._view_model.insert_note(title, self._state.description)

        if task is not None:
            self._write = task
            await asyncio.shield(task)
        return True

    async def back(self) -> bool:
        """Leave the editor; a non-blank title is saved first."""
        if self._state.title.strip():
            return await self.save()
        return True

    def close(self) -> None:
        self._cancel_dismiss()

    def _show_error(self) -> None:
        self._cancel_dismiss()
        self._set(error=EMPTY_TITLE_ERROR)
        loop = asyncio.get_running_loop()
        self._dismiss_handle = loop.call_later(self._error_dismiss_seconds, self._dismiss_error)

    def _dismiss_error(self) -> None:
        self._dismiss_handle = None
        self._set(error=None)

    def _cancel_dismiss(self) -> None:
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None
