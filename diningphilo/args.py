"""Command-line argument validation for the dining philosophers simulation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

_LONG_MAX = 2**63 - 1
_MIN_PHILOSOPHERS = 1
_MAX_PHILOSOPHERS = 200
_DIGITS = frozenset("0123456789")


class ArgumentError(ValueError):
    """Raised when the command-line arguments are not acceptable."""


@dataclass(frozen=True)
class Settings:
    """Parameters of one simulation run; times are in milliseconds."""

    philosophers: int
    time_to_die: int
    time_to_eat: int
    time_to_sleep: int
    must_eat: int | None = None


def _to_number(text: str) -> int:
    value = int(text)
    if value > _LONG_MAX:
        raise ArgumentError("argument number is too large")
    return value


def parse_args(argv: Sequence[str]) -> Settings:
    """Validate the arguments that follow the program name and build Settings.

    Expects four or five unsigned decimal numbers: the number of philosophers,
    the time to die, the time to eat, the time to sleep and, optionally, the
    number of meals each philosopher must eat.
    """
    args = list(argv)
    if len(args) not in (4, 5):
        raise ArgumentError("invalid nb of args")
    if any(not arg for arg in args):
        raise ArgumentError("please enter a non empty argument!")
    if any(not set(arg) <= _DIGITS for arg in args):
        raise ArgumentError("non digit argument")
    numbers = [_to_number(arg) for arg in args]
    philosophers, time_to_die, time_to_eat, time_to_sleep = numbers[:4]
    must_eat = numbers[4] if len(numbers) == 5 else None
    if not _MIN_PHILOSOPHERS <= philosophers <= _MAX_PHILOSOPHERS:
        raise ArgumentError("number of philosopher must be between 1 and 200")
    return Settings(
        philosophers=philosophers,
        time_to_die=time_to_die,
        time_to_eat=time_to_eat,
        time_to_sleep=time_to_sleep,
        must_eat=must_eat,
    )