"""
Event Publishers.

Domain-specific event publishers. Each publisher wraps the broker's
publish() method with the correct channel name and event schema.

Stores call a publisher after their write transaction has committed, so
live queries that re-run in response only ever read committed data.

Usage:
    from noteapp.backend.events.publishers import NoteEventPublisher

    publisher = NoteEventPublisher(broker)
    publisher.note_created(note_id, title)
"""

from noteapp.backend.core.logging import get_logger
from noteapp.backend.events.broker import ChangeBroker
from noteapp.backend.events.schemas import (
    EventEnvelope,
    NoteCreated,
    NoteDeleted,
    NoteFavoriteToggled,
    NoteUpdated,
    ThemePreferenceChanged,
)

logger = get_logger(__name__)


class _Publisher:
    CHANNEL: str
    SOURCE: str

    def __init__(self, broker: ChangeBroker) -> None:
        self.broker = broker

    def _publish(self, event: EventEnvelope) -> None:
        self.broker.publish(event, channel=self.CHANNEL)
        logger.debug(
            "Event published",
            extra={
                "channel": self.CHANNEL,
                "event_type": event.event_type,
                "event_id": event.event_id,
            },
        )


class NoteEventPublisher(_Publisher):
    """Publishes note change events on the notes channel."""

    CHANNEL = "notes"
    SOURCE = "note-store"

    def note_created(self, note_id: int, title: str) -> None:
        """Publish a notes.note.created event."""
        self._publish(
            NoteCreated(source=self.SOURCE, payload={"note_id": note_id, "title": title}),
        )

    def note_updated(self, note_id: int) -> None:
        """Publish a notes.note.updated event."""
        self._publish(NoteUpdated(source=self.SOURCE, payload={"note_id": note_id}))

    def note_deleted(self, note_id: int) -> None:
        """Publish a notes.note.deleted event."""
        self._publish(NoteDeleted(source=self.SOURCE, payload={"note_id": note_id}))

    def note_favorite_toggled(self, note_id: int) -> None:
        """Publish a notes.note.favorite_toggled event."""
        self._publish(
            NoteFavoriteToggled(source=self.SOURCE, payload={"note_id": note_id}),
        )


class PreferenceEventPublisher(_Publisher):
    """Publishes preference change events on the preferences channel."""

    CHANNEL = "preferences"
    SOURCE = "preference-store"

    def theme_changed(self, values: dict[str, bool]) -> None:
        """Publish a preferences.theme.changed event."""
        self._publish(ThemePreferenceChanged(source=self.SOURCE, payload=values))
