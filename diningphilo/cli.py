"""Command-line entry points for both simulation variants."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from diningphilo.args import ArgumentError, Settings, parse_args
from diningphilo.pool import run_simulation as run_pool
from diningphilo.table import run_simulation as run_table


def _run(
    argv: Sequence[str] | None,
    simulate: Callable[[Settings, TextIO], None],
) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        settings = parse_args(args)
    except ArgumentError as error:
        sys.stderr.write(f"Error: {error}\n")
        return 1
    simulate(settings, sys.stdout)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the table simulation, where each philosopher has two fixed forks."""
    return _run(argv, run_table)


def main_bonus(argv: Sequence[str] | None = None) -> int:
    """Run the pooled-forks simulation with a waiter and per-diner monitors."""
    return _run(argv, run_pool)


if __name__ == "__main__":
    sys.exit(main())