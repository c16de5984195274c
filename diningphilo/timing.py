"""Millisecond clock, interruptible sleep and the shared event log."""

from __future__ import annotations

import enum
import threading
import time
from collections.abc import Callable
from typing import TextIO

_POLL_SECONDS = 0.0005


class Action(enum.Enum):
    """What a philosopher reports doing."""

    TAKEN_FORK = "has taken a fork"
    EATING = "is eating"
    SLEEPING = "is sleeping"
    THINKING = "is thinking"
    DIED = "died"


def now_ms() -> int:
    """Wall-clock time in whole milliseconds."""
    return time.time_ns() // 1_000_000


def sleep_ms(duration: int, should_stop: Callable[[], bool] | None = None) -> bool:
    """Sleep for ``duration`` milliseconds in short steps.

    When ``should_stop`` is given it is polled between steps and the sleep ends
    as soon as it returns true. Returns True if the full duration elapsed.
    """
    start = now_ms()
    while now_ms() - start < duration:
        if should_stop is not None and should_stop():
            return False
        time.sleep(_POLL_SECONDS)
    return True


class EventLog:
    """Thread-safe writer of ``<elapsed ms> <id> <action>`` lines.

    Once a death has been written the log is closed and further entries are
    dropped. ``lock`` is reentrant, so callers may hold it around a check and
    a write to make the pair atomic.
    """

    def __init__(self, stream: TextIO, start_time: int) -> None:
        self.stream = stream
        self.start_time = start_time
        self.lock = threading.RLock()
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once a death has been logged."""
        with self.lock:
            return self._closed

    def write(self, philosopher_id: int, action: Action) -> bool:
        """Log one action; returns False if the entry was dropped."""
        elapsed = now_ms() - self.start_time
        with self.lock:
            if self._closed:
                return False
            self.stream.write(f"{elapsed} {philosopher_id} {action.value}\n")
            self.stream.flush()
            if action is Action.DIED:
                self._closed = True
            return True

    def restart(self) -> int:
        """Reset the reference time to now and return it."""
        with self.lock:
            self.start_time = now_ms()
            return self.start_time