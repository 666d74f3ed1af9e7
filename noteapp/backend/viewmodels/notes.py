"""
Note List View-Model.

Holds the home screen's inputs (search text and the favorites-only flag)
and derives the visible note list from them. The derivation switches the
data source rather than filtering one cached list:

    favorites only + query  → favorites query, filtered by the text
    favorites only          → favorites query
    query                   → store search query
    neither                 → every note

Every input change disposes the current upstream subscription before the
next one is created, so a superseded query can never deliver results.

Writes are fire-and-forget: each returns the asyncio.Task running it and
the list refreshes through the live query, not through a return value.

Usage:
    view_model = NoteViewModel(note_service, stop_timeout=5.0)
    subscription = view_model.observe_notes(render)
    view_model.on_search_query_change("trip")
    view_model.insert_note("Groceries", "Milk, eggs")
"""

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

from noteapp.backend.core.logging import get_logger
from noteapp.backend.events.live_query import (
    ErrorHandler,
    LiveQuery,
    Subscription,
    report_error,
)
from noteapp.backend.schemas.note import NoteCreate, NoteRead
from noteapp.backend.services.note import NoteService

logger = get_logger(__name__)

NotesObserver = Callable[[list[NoteRead]], None]


class NoteViewModel:
    """State controller for the note list."""

    def __init__(
        self,
        service: NoteService,
        stop_timeout: float = 5.0,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self._service = service
        self._stop_timeout = stop_timeout
        self._error_handler = error_handler

        self._search_query = ""
        self._favorites_only = False
        self._notes: list[NoteRead] = []

        self._observers: list[NotesObserver] = []
        self._upstream: Subscription | None = None
        self._stop_handle: asyncio.TimerHandle | None = None
        self._pending: set[asyncio.Task[Any]] = set()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def favorites_only(self) -> bool:
        return self._favorites_only

    @property
    def notes(self) -> list[NoteRead]:
        """Last derived list (empty until the first result arrives)."""
        return self._notes

    @property
    def is_observing(self) -> bool:
        """True while an upstream live query subscription exists."""
        return self._upstream is not None

    def set_error_handler(self, handler: ErrorHandler | None) -> None:
        self._error_handler = handler

    # -------------------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------------------

    def on_search_query_change(self, query: str) -> None:
        if query == self._search_query:
            return
        self._search_query = query
        self._input_changed()

    def toggle_favorite_filter(self) -> None:
        self.set_favorites_only(not self._favorites_only)

    def set_favorites_only(self, favorites_only: bool) -> None:
        if favorites_only == self._favorites_only:
            return
        self._favorites_only = favorites_only
        self._input_changed()

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def observe_notes(self, observer: NotesObserver) -> Subscription:
        """
        Observe the derived note list.

        The observer gets the current list right away and every new list
        after that. The upstream query stays alive for stop_timeout seconds
        after the last observer leaves, so quick re-observation reuses it.
        """
        self._observers.append(observer)
        self._cancel_stop()
        observer(self._notes)
        if self._upstream is None:
            self._start_upstream()
        return Subscription(lambda: self._remove_observer(observer))

    def _remove_observer(self, observer: NotesObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)
        if self._observers or self._upstream is None:
            return
        if self._stop_timeout <= 0:
            self._stop_upstream()
        else:
            loop = asyncio.get_running_loop()
            self._stop_handle = loop.call_later(self._stop_timeout, self._stop_upstream)

    def _select_source(self) -> LiveQuery[list[NoteRead]]:
        query = self._search_query
        has_query = bool(query.strip())

        if self._favorites_only and has_query:
            return self._service.favorite_notes().map(
                lambda notes: [note for note in notes if note.matches(query)],
                name=f"notes:favorites:search:{query}",
            )
        if self._favorites_only:
            return self._service.favorite_notes()
        if has_query:
            return self._service.search_notes(query)
        return self._service.all_notes()

    def _start_upstream(self) -> None:
        if self._upstream is not None:
            self._upstream.dispose()
            self._upstream = None
        source = self._select_source()
        logger.debug("Deriving notes", extra={"source": source.name})
        self._upstream = source.subscribe(self._emit, self._handle_error)

    def _input_changed(self) -> None:
        # The cached list belongs to the replaced source and must not be replayed
        self._notes = []
        # With nobody observing, the next observe_notes() derives from scratch
        if self._upstream is not None:
            self._start_upstream()

    def _stop_upstream(self) -> None:
        self._stop_handle = None
        if self._upstream is not None:
            self._upstream.dispose()
            self._upstream = None
            logger.debug("Upstream released")

    def _cancel_stop(self) -> None:
        if self._stop_handle is not None:
            self._stop_handle.cancel()
            self._stop_handle = None

    def _emit(self, notes: list[NoteRead]) -> None:
        self._notes = notes
        for observer in list(self._observers):
            observer(notes)

    def _handle_error(self, exc: BaseException) -> None:
        if self._error_handler is not None:
            self._error_handler(exc)
        else:
            report_error(exc)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def insert_note(self, title: str, description: str = "") -> asyncio.Task[Any] | None:
        """
        Queue creation of a note.

        Returns:
            The task performing the write, or None when the title is blank
        """
        if not title.strip():
            return None
        data = NoteCreate(title=title.strip(), description=description.strip())
        return self._launch("insert_note", self._service.insert_note(data))

    def update_note(self, note: NoteRead) -> asyncio.Task[Any]:
        return self._launch("update_note", self._service.update_note(note))

    def delete_note(self, note: NoteRead) -> asyncio.Task[Any]:
        return self._launch("delete_note", self._service.delete_note(note))

    def toggle_favorite(self, note_id: int) -> asyncio.Task[Any]:
        return self._launch("toggle_favorite", self._service.toggle_favorite(note_id))

    async def get_note_by_id(self, note_id: int) -> NoteRead | None:
        return await self._service.get_note_by_id(note_id)

    def _launch(self, operation: str, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro, name=f"noteapp:{operation}")
        self._pending.add(task)
        task.add_done_callback(self._on_write_done)
        return task

    def _on_write_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Queued write failed",
                extra={"task": task.get_name(), "error": str(exc)},
            )
            self._handle_error(exc)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def aclose(self) -> None:
        """Wait for queued writes, then release every subscription."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        self._cancel_stop()
        self._stop_upstream()
        self._observers.clear()
