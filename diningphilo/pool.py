"""Dining philosophers where every diner is watched by its own monitor.

Forks are a shared pool rather than fixed left and right utensils. A waiter
admits one diner at a time to pick up two forks. Each diner has a private
monitor. The monitor announces the diner's death, or dismisses the diner once
it has eaten the required number of meals. The run ends when every diner has
left or one of them has died.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import TextIO

from diningphilo.args import Settings
from diningphilo.timing import Action, EventLog, now_ms, sleep_ms

_MONITOR_POLL_SECONDS = 0.0005
_ACQUIRE_POLL_SECONDS = 0.001


@dataclass
class _Guest:
    """One diner, its meal bookkeeping and whether it has left the table."""

    id: int
    last_meal: int
    meals: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)
    finished: threading.Event = field(default_factory=threading.Event)

    def snapshot(self) -> tuple[int, int]:
        with self.lock:
            return self.last_meal, self.meals


class Pool:
    """Runs the simulation with a shared pool of forks and a waiter."""

    def __init__(self, settings: Settings, log: EventLog) -> None:
        self.settings = settings
        self.log = log
        self._forks = threading.Semaphore(settings.philosophers)
        self._waiter = threading.Semaphore(1)
        self._stop = threading.Event()

    def run(self) -> None:
        """Start every diner with its monitor and wait until all have left."""
        if self.settings.must_eat == 0:
            return
        start = now_ms()
        guests = [
            _Guest(id=position + 1, last_meal=start)
            for position in range(self.settings.philosophers)
        ]
        self.log.restart()
        diners: list[threading.Thread] = []
        monitors: list[threading.Thread] = []
        try:
            for guest in guests:
                diner = threading.Thread(target=self._live, args=(guest,), daemon=True)
                monitor = threading.Thread(target=self._watch, args=(guest,), daemon=True)
                diner.start()
                diners.append(diner)
                monitor.start()
                monitors.append(monitor)
        except RuntimeError:
            self._stop.set()
        for thread in diners:
            thread.join()
        self._stop.set()
        for thread in monitors:
            thread.join()

    def _stopped(self) -> bool:
        return self._stop.is_set()

    def _leaving(self, guest: _Guest) -> bool:
        return self._stop.is_set() or guest.finished.is_set()

    def _report(self, guest: _Guest, action: Action) -> None:
        with self.log.lock:
            if not self._leaving(guest):
                self.log.write(guest.id, action)

    def _announce_death(self, guest: _Guest) -> None:
        with self.log.lock:
            if self._stopped():
                return
            self.log.write(guest.id, Action.DIED)
            self._stop.set()

    def _dismiss(self, guest: _Guest) -> None:
        # Taking the log lock ensures the diner is not in the middle of a line.
        with self.log.lock:
            guest.finished.set()

    def _acquire(self, guest: _Guest, semaphore: threading.Semaphore) -> bool:
        while not semaphore.acquire(timeout=_ACQUIRE_POLL_SECONDS):
            if self._leaving(guest):
                return False
        return True

    def _eat(self, guest: _Guest) -> None:
        held = 0
        completed = False
        try:
            if not self._acquire(guest, self._waiter):
                return
            try:
                for _ in range(2):
                    if not self._acquire(guest, self._forks):
                        return
                    held += 1
                    self._report(guest, Action.TAKEN_FORK)
            finally:
                self._waiter.release()
            with guest.lock:
                guest.last_meal = now_ms()
            self._report(guest, Action.EATING)
            completed = sleep_ms(self.settings.time_to_eat, lambda: self._leaving(guest))
        finally:
            for _ in range(held):
                self._forks.release()
        if not completed:
            return
        with guest.lock:
            guest.meals += 1
        self._report(guest, Action.SLEEPING)
        sleep_ms(self.settings.time_to_sleep, lambda: self._leaving(guest))

    def _sit_alone(self, guest: _Guest) -> None:
        if not self._acquire(guest, self._forks):
            return
        try:
            self._report(guest, Action.TAKEN_FORK)
            while not self._leaving(guest):
                time.sleep(_ACQUIRE_POLL_SECONDS)
        finally:
            self._forks.release()

    def _live(self, guest: _Guest) -> None:
        if self.settings.philosophers == 1:
            self._sit_alone(guest)
            return
        while not self._leaving(guest):
            self._eat(guest)
            self._report(guest, Action.THINKING)

    def _watch(self, guest: _Guest) -> None:
        target = self.settings.must_eat
        while not self._leaving(guest):
            last_meal, meals = guest.snapshot()
            if now_ms() - last_meal >= self.settings.time_to_die:
                self._announce_death(guest)
                return
            if target is not None and meals == target:
                self._dismiss(guest)
                return
            time.sleep(_MONITOR_POLL_SECONDS)


def run_simulation(settings: Settings, stream: TextIO) -> None:
    """Run the pooled-forks simulation, logging to ``stream``."""
    Pool(settings, EventLog(stream, now_ms())).run()