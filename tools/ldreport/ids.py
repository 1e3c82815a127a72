from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def fixed_clock(at: datetime) -> Clock:
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    return lambda: at


def iso_utc(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat()


class ReportIdGenerator:
    """
    Report ids of the form "<prefix>-<epoch ms>".

    Ids are strictly increasing per generator: an instant at or before the
    last issued one is bumped to last + 1.
    """

    def __init__(self, prefix: str = "LDD", clock: Optional[Clock] = None):
        self.prefix = prefix
        self.clock = clock or utc_now
        self._last = -1
        self._lock = threading.Lock()

    def next_id(self, at: Optional[datetime] = None) -> str:
        instant = at if at is not None else self.clock()
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        ms = int(instant.timestamp() * 1000)
        with self._lock:
            if ms <= self._last:
                ms = self._last + 1
            self._last = ms
        return f"{self.prefix}-{ms}"
