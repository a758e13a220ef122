"""The current time as seen by a single compilation."""

from __future__ import annotations

import datetime as dt
import threading
from typing import Callable


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def timezone_from_offset(offset: int | None) -> dt.tzinfo | None:
    """The timezone `offset` hours east of UTC, or the local one if `offset` is None.

    Returns None when the offset is out of bounds, i.e. a whole day or more.
    """
    if offset is None:
        return _utc_now().astimezone().tzinfo
    if not -24 < offset < 24:
        return None
    return dt.timezone(dt.timedelta(hours=offset))


class Now:
    """The current time, taken once on first use and kept for consistency afterwards.

    `clock` returns the current time as an aware datetime; it defaults to the system clock.
    """

    def __init__(self, clock: Callable[[], dt.datetime] | None = None) -> None:
        self._clock = clock if clock is not None else _utc_now
        self._now: dt.datetime | None = None
        self._lock = threading.Lock()

    def _utc(self) -> dt.datetime:
        with self._lock:
            if self._now is None:
                self._now = self._clock().astimezone(dt.timezone.utc)
            return self._now

    def date_with_offset(self, offset: int | None) -> dt.date | None:
        """Today's date `offset` hours east of UTC, or in local time if `offset` is None."""
        now = self._utc()
        if offset is None:
            return now.astimezone().date()
        tz = timezone_from_offset(offset)
        if tz is None:
            return None
        return now.astimezone(tz).date()

    def datetime(self) -> dt.datetime:
        """The current UTC time, naive and to the whole second."""
        return self._utc().replace(tzinfo=None, microsecond=0)

    def __repr__(self) -> str:
        return f"Now(now={self._now!r})"