"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_millis() -> int:
    """Milliseconds since the epoch, the unit notes are timestamped in."""
    return time.time_ns() // 1_000_000


def format_timestamp(millis: int) -> str:
    """Render a note timestamp in local time, e.g. 'Mar 04, 2026 • 09:15 PM'."""
    local = datetime.fromtimestamp(millis / 1000)
    return local.strftime("%b %d, %Y • %I:%M %p")
