"""
Event Broker.

In-process publish/subscribe hub that connects store writers to live
queries. A single broker is created by the composition root and shared by
every store. Delivery is synchronous and happens on the event loop that
performed the write, after the write has committed.

Usage:
    from noteapp.backend.events.broker import ChangeBroker

    broker = ChangeBroker()
    unsubscribe = broker.subscribe("notes", handler)
    broker.publish(event, channel="notes")
    unsubscribe()
"""

from collections import defaultdict
from collections.abc import Callable

from noteapp.backend.core.logging import get_logger
from noteapp.backend.events.schemas import EventEnvelope

logger = get_logger(__name__)

EventHandler = Callable[[EventEnvelope], None]


class ChangeBroker:
    """Channel-keyed broadcast of change events to registered handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, channel: str, handler: EventHandler) -> Callable[[], None]:
        """
        Register a handler for a channel.

        Returns:
            A callable that removes the handler. Calling it twice is harmless.
        """
        self._handlers[channel].append(handler)
        logger.debug("Handler subscribed", extra={"channel": channel})

        def unsubscribe() -> None:
            handlers = self._handlers.get(channel, [])
            if handler in handlers:
                handlers.remove(handler)
                logger.debug("Handler unsubscribed", extra={"channel": channel})

        return unsubscribe

    def publish(self, event: EventEnvelope, channel: str) -> None:
        """Deliver an event to every handler registered for the channel."""
        for handler in list(self._handlers.get(channel, [])):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Event handler failed",
                    extra={"channel": channel, "event_type": event.event_type},
                )

    def subscriber_count(self, channel: str) -> int:
        """Number of handlers currently registered for a channel."""
        return len(self._handlers.get(channel, []))
