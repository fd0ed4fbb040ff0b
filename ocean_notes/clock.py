from __future__ import annotations
import time
from typing import Callable, Optional


def wall_ms() -> int:
    return time.time_ns() // 1_000_000


class LogicalClock:
    """
    Millisecond timestamps that strictly increase within a process, even when
    the wall clock stalls or steps backwards.
    """

    def __init__(self, source: Optional[Callable[[], int]] = None):
        self._source = source or wall_ms
        self._last = 0

    def now(self) -> int:
        value = max(self._source(), self._last + 1)
        self._last = value
        return value

    def observe(self, value: int) -> None:
        """Never hand out a timestamp at or below ``value`` afterwards."""
        self._last = max(self._last, value)
