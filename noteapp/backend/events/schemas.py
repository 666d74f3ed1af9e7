"""
Event Schemas.

Standardized event envelope and domain-specific event types.
All change notifications published through the broker use the
EventEnvelope base.

Naming convention for event_type: domain.entity.action (dot notation)
Channel naming convention: one channel per stored table or file
("notes", "preferences"); live queries listen per channel.

Usage:
    from noteapp.backend.events.schemas import NoteCreated

    event = NoteCreated(source="note-store", payload={"note_id": 1})
"""

from uuid import uuid4

from pydantic import BaseModel, Field

from noteapp.backend.core.utils import utc_now


class EventEnvelope(BaseModel):
    """Base event envelope. All events inherit from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        event_type: Domain event type in dot notation (e.g. notes.note.created)
        event_version: Schema version for forward compatibility
        timestamp: ISO 8601 UTC timestamp
        source: Store that published the event
        payload: Event-specific data
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    event_version: int = 1
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    source: str
    payload: dict


class NoteCreated(EventEnvelope):
    """Published when a note is inserted (or replaced by explicit id)."""

    event_type: str = "notes.note.created"


class NoteUpdated(EventEnvelope):
    """Published when a note is replaced by an edit."""

    event_type: str = "notes.note.updated"


class NoteDeleted(EventEnvelope):
    """Published when a note is deleted."""

    event_type: str = "notes.note.deleted"


class NoteFavoriteToggled(EventEnvelope):
    """Published when a note's favorite flag flips."""

    event_type: str = "notes.note.favorite_toggled"


class ThemePreferenceChanged(EventEnvelope):
    """Published when the theme preference file is rewritten."""

    event_type: str = "preferences.theme.changed"
