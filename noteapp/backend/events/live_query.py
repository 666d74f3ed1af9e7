"""
Live Queries.

A live query pairs a read coroutine with a broker channel. Subscribers
receive the current result as soon as the first read completes, and a
fresh result after every change event published on the channel.

Delivery rules:
    - One read in flight per subscription. Change events that arrive
      while a read is running cause exactly one more read afterwards, so
      bursts of writes coalesce and results are emitted in order.
    - dispose() is synchronous: it unregisters from the broker, cancels
      the in-flight read, and guarantees no further callbacks.

Usage:
    query = LiveQuery(repo.list_all, broker, channel="notes")
    subscription = query.subscribe(render)
    ...
    subscription.dispose()

    # Derived queries share the channel and transform each result
    titles = query.map(lambda notes: [n.title for n in notes])
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from noteapp.backend.core.logging import get_logger
from noteapp.backend.events.broker import ChangeBroker
from noteapp.backend.events.schemas import EventEnvelope

logger = get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")

ErrorHandler = Callable[[BaseException], None]


def report_error(exc: BaseException) -> None:
    """Default error sink: hand the failure to the loop's exception handler."""
    asyncio.get_running_loop().call_exception_handler({
        "message": "Live query failed",
        "exception": exc,
    })


class Subscription:
    """Handle returned by subscribe(); dispose() releases it."""

    def __init__(self, on_dispose: Callable[[], None] | None = None) -> None:
        self._on_dispose = on_dispose
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._on_dispose is not None:
            self._on_dispose()


class _QueryObserver(Generic[T]):
    """Per-subscriber refresh loop."""

    def __init__(
        self,
        query: "LiveQuery[T]",
        on_next: Callable[[T], None],
        on_error: ErrorHandler,
    ) -> None:
        self._query = query
        self._on_next = on_next
        self._on_error = on_error
        self._loop = asyncio.get_running_loop()
        self._task: asyncio.Task[None] | None = None
        self._dirty = False
        self._disposed = False
        self._unsubscribe = query.broker.subscribe(query.channel, self._on_change)
        self._schedule()

    def _on_change(self, event: EventEnvelope) -> None:
        if not self._disposed:
            self._schedule()

    def _schedule(self) -> None:
        if self._task is not None and not self._task.done():
            self._dirty = True
            return
        self._task = self._loop.create_task(self._refresh())

    async def _refresh(self) -> None:
        while True:
            self._dirty = False
            try:
                value = await self._query.fetch()
                if self._disposed:
                    return
                self._on_next(value)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                if self._disposed:
                    return
                logger.error(
                    "Live query refresh failed",
                    extra={"query": self._query.name, "error": str(exc)},
                )
                self._on_error(exc)
            # A change during a failed read still gets its own re-run
            if not self._dirty or self._disposed:
                return

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._unsubscribe()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None


class LiveQuery(Generic[T]):
    """A read that re-runs whenever its channel reports a change."""

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        broker: ChangeBroker,
        channel: str,
        name: str = "",
    ) -> None:
        self._fetch = fetch
        self.broker = broker
        self.channel = channel
        self.name = name or channel

    async def fetch(self) -> T:
        """Run the query once."""
        return await self._fetch()

    def map(self, transform: Callable[[T], U], name: str = "") -> "LiveQuery[U]":
        """Derive a query that applies transform to every result."""

        async def fetch() -> U:
            return transform(await self._fetch())

        return LiveQuery(fetch, self.broker, self.channel, name=name or f"{self.name}|map")

    def subscribe(
        self,
        on_next: Callable[[T], None],
        on_error: ErrorHandler | None = None,
    ) -> Subscription:
        """
        Start observing the query. Must be called from a running event loop.

        Args:
            on_next: Receives the current result, then every refreshed result
            on_error: Receives read failures; defaults to the loop's
                exception handler

        Returns:
            Subscription whose dispose() stops all further delivery
        """
        observer: _QueryObserver[Any] = _QueryObserver(
            self, on_next, on_error or report_error,
        )
        logger.debug("Live query subscribed", extra={"query": self.name})
        return Subscription(observer.dispose)
