"""
Change Events.

Stores publish an EventEnvelope on a broker channel after every write.
Live queries subscribe to those channels and re-run their reads.
"""

from noteapp.backend.events.broker import ChangeBroker
from noteapp.backend.events.live_query import LiveQuery, Subscription

__all__ = [
    "ChangeBroker",
    "LiveQuery",
    "Subscription",
]
