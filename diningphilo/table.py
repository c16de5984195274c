"""Thread-based dining philosophers: one thread per philosopher plus a monitor."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import TextIO

from diningphilo.args import Settings
from diningphilo.timing import Action, EventLog, now_ms, sleep_ms

_MONITOR_POLL_SECONDS = 0.00005
_FORK_POLL_SECONDS = 0.001
_EVEN_START_DELAY_SECONDS = 0.001


@dataclass
class _Seat:
    """One philosopher at the table and the two forks within reach."""

    id: int
    left_fork: threading.Lock
    right_fork: threading.Lock
    last_meal: int
    meals: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)

    def snapshot(self) -> tuple[int, int]:
        with self.lock:
            return self.last_meal, self.meals


class Table:
    """Runs the simulation with shared forks guarded by locks."""

    def __init__(self, settings: Settings, log: EventLog) -> None:
        self.settings = settings
        self.log = log
        self._stop = threading.Event()

    def stop(self) -> None:
        """Ask every philosopher and the monitor to finish."""
        self._stop.set()

    def stopped(self) -> bool:
        """True once the simulation has been asked to finish."""
        return self._stop.is_set()

    def run(self) -> None:
        """Seat the philosophers, run them until the end, and wait for them."""
        if self.settings.must_eat == 0:
            return
        seats = self._seat_philosophers()
        self.log.restart()
        threads: list[threading.Thread] = []
        try:
            for seat in seats:
                thread = threading.Thread(target=self._live, args=(seat,), daemon=True)
                thread.start()
                threads.append(thread)
            monitor = threading.Thread(target=self._watch, args=(seats,), daemon=True)
            monitor.start()
            threads.insert(0, monitor)
        except RuntimeError:
            self.stop()
        for thread in threads:
            thread.join()

    def _seat_philosophers(self) -> list[_Seat]:
        count = self.settings.philosophers
        forks = [threading.Lock() for _ in range(count)]
        start = now_ms()
        return [
            _Seat(
                id=position + 1,
                left_fork=forks[count - 1 if position == 0 else position - 1],
                right_fork=forks[position],
                last_meal=start,
            )
            for position in range(count)
        ]

    def _report(self, seat: _Seat, action: Action) -> None:
        with self.log.lock:
            if not self.stopped():
                self.log.write(seat.id, action)

    def _announce_death(self, seat: _Seat) -> None:
        with self.log.lock:
            if self.stopped():
                return
            self.log.write(seat.id, Action.DIED)
            self.stop()

    def _done(self, seat: _Seat) -> bool:
        _, meals = seat.snapshot()
        if self.settings.must_eat is not None and meals == self.settings.must_eat:
            return True
        return self.stopped()

    def _take(self, fork: threading.Lock) -> bool:
        while not fork.acquire(timeout=_FORK_POLL_SECONDS):
            if self.stopped():
                return False
        return True

    def _eat(self, seat: _Seat) -> None:
        ate = False
        if not self._take(seat.left_fork):
            return
        try:
            self._report(seat, Action.TAKEN_FORK)
            if not self._take(seat.right_fork):
                return
            try:
                self._report(seat, Action.TAKEN_FORK)
                if self._done(seat):
                    return
                self._report(seat, Action.EATING)
                with seat.lock:
                    seat.last_meal = now_ms()
                sleep_ms(self.settings.time_to_eat, self.stopped)
                ate = True
            finally:
                seat.right_fork.release()
        finally:
            seat.left_fork.release()
        if not ate:
            return
        with seat.lock:
            seat.meals += 1
        if self._done(seat):
            return
        self._report(seat, Action.SLEEPING)
        sleep_ms(self.settings.time_to_sleep, self.stopped)

    def _live(self, seat: _Seat) -> None:
        if seat.id % 2 == 0:
            time.sleep(_EVEN_START_DELAY_SECONDS)
        if self.settings.philosophers == 1:
            self._report(seat, Action.TAKEN_FORK)
            return
        while not self._done(seat):
            self._eat(seat)
            self._report(seat, Action.THINKING)

    def _all_ate_enough(self, seats: list[_Seat]) -> bool:
        target = self.settings.must_eat
        return target is not None and all(seat.snapshot()[1] == target for seat in seats)

    def _someone_died(self, seats: list[_Seat]) -> bool:
        for seat in seats:
            last_meal, _ = seat.snapshot()
            if now_ms() - last_meal >= self.settings.time_to_die:
                self._announce_death(seat)
                return True
        return False

    def _watch(self, seats: list[_Seat]) -> None:
        while not self.stopped():
            if self._all_ate_enough(seats):
                self.stop()
                return
            if self._someone_died(seats):
                return
            time.sleep(_MONITOR_POLL_SECONDS)


def run_simulation(settings: Settings, stream: TextIO) -> None:
    """Run the thread-based simulation, logging to ``stream``."""
    Table(settings, EventLog(stream, now_ms())).run()