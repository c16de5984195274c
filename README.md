# diningphilo

A simulation of the dining philosophers problem. Philosophers sit around a
table. Each one eats, sleeps and thinks, over and over. To eat, a philosopher
needs two forks. A philosopher who goes too long without eating dies, and the
simulation ends.

There are two runners. Both use threads.

- `philo` (`diningphilo.table`). Each fork is a lock shared by two
  neighbours. One monitor thread watches every philosopher. It stops the run
  when someone starves or when everyone has eaten the required number of
  meals.
- `philo-bonus` (`diningphilo.pool`). All forks sit in one shared pool, a
  counting semaphore. A waiter semaphore lets one philosopher at a time pick
  up a pair of forks. Each philosopher has its own monitor thread. That
  monitor announces the philosopher's death, or sends the philosopher away
  once the required meals are eaten. The run ends when every philosopher has
  left or one has died.

## Installation

```
pip install .
```

## Usage

```
philo number_of_philosophers time_to_die time_to_eat time_to_sleep [number_of_times_each_philosopher_must_eat]
philo-bonus number_of_philosophers time_to_die time_to_eat time_to_sleep [number_of_times_each_philosopher_must_eat]
```

Times are in milliseconds. There must be between 1 and 200 philosophers.
Every argument must be a non-empty string of decimal digits.

Example:

```
philo 5 800 200 200 7
```

Each line of output has this form:

```
<milliseconds since start> <philosopher id> <action>
```

The action is one of `has taken a fork`, `is eating`, `is sleeping`,
`is thinking` or `died`. Nothing is printed after a `died` line.

If the arguments are invalid, the command writes `Error: <reason>` to
standard error and exits with status 1. If the meal count is 0, the
simulation does not run.

## Library use

`diningphilo.args.parse_args` takes the arguments that come after the
program name. It returns a frozen `Settings` dataclass with the fields
`philosophers`, `time_to_die`, `time_to_eat`, `time_to_sleep` and `must_eat`.
`must_eat` is `None` when no meal count was given. If the arguments are
invalid, `parse_args` raises `ArgumentError`, a subclass of `ValueError`.

```python
import sys
from diningphilo.args import ArgumentError, parse_args
from diningphilo.table import run_simulation

try:
    settings = parse_args(["4", "410", "200", "200", "3"])
except ArgumentError as exc:
    print(exc)
else:
    run_simulation(settings, sys.stdout)
```

`diningphilo.pool.run_simulation(settings, stream)` runs the pooled-forks
runner and takes the same arguments.

`diningphilo.timing` provides the shared pieces:

- `now_ms()`: the wall-clock time in milliseconds.
- `sleep_ms(duration, should_stop)`: a sleep that can be cut short. It
  returns `True` if the full duration passed.
- `Action`: an enum of the actions listed above.
- `EventLog`: a thread-safe line writer. It stops writing once a death has
  been logged.

`diningphilo.table.Table` and `diningphilo.pool.Pool` each take a `Settings`
and an `EventLog`, and have a `run()` method. `Table` also has `stop()` and
`stopped()`.

## Limitations

Both runners use threads inside a single Python process. Neither one starts
separate processes.