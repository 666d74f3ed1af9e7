"""
Navigation Routes.

The app has three destinations:

    home                    note list
    add_note                editor for a new note
    edit_note/{note_id}     editor for an existing note

Routes are plain strings so they can be logged and passed around; build
them with the helpers here and parse them back with parse_route().
"""

from dataclasses import dataclass
from enum import Enum

HOME = "home"
ADD_NOTE = "add_note"
EDIT_NOTE = "edit_note"


class Screen(str, Enum):
    HOME = HOME
    ADD_NOTE = ADD_NOTE
    EDIT_NOTE = EDIT_NOTE


@dataclass(frozen=True)
class Destination:
    screen: Screen
    note_id: int | None = None

    @property
    def route(self) -> str:
        if self.screen is Screen.EDIT_NOTE:
            return edit_note_route(self.note_id)
        return self.screen.value


def home_route() -> str:
    return HOME


def add_note_route() -> str:
    return ADD_NOTE


def edit_note_route(note_id: int | None) -> str:
    if note_id is None:
        raise ValueError("edit_note route requires a note id")
    return f"{EDIT_NOTE}/{note_id}"


def parse_route(route: str) -> Destination:
    """
    Turn a route string back into a destination.

    Raises:
        ValueError: If the route is unknown or the note id is not an integer
    """
    head, _, tail = route.strip("/").partition("/")
    if head == HOME and not tail:
        return Destination(Screen.HOME)
    if head == ADD_NOTE and not tail:
        return Destination(Screen.ADD_NOTE)
    if head == EDIT_NOTE and tail:
        try:
            return Destination(Screen.EDIT_NOTE, int(tail))
        except ValueError as e:
            raise ValueError(f"Invalid note id in route: {route}") from e
    raise ValueError(f"Unknown route: {route}")
