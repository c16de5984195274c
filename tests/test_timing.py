import io
import threading
import time

import pytest

from diningphilo.timing import Action, EventLog, now_ms, sleep_ms


@pytest.mark.parametrize(
    "action, message",
    [
        (Action.TAKEN_FORK, "has taken a fork"),
        (Action.EATING, "is eating"),
        (Action.SLEEPING, "is sleeping"),
        (Action.THINKING, "is thinking"),
        (Action.DIED, "died"),
    ],
)
def test_action_messages_appear_in_log(action, message):
    stream = io.StringIO()
    log = EventLog(stream, now_ms())
    assert log.write(7, action) is True
    line = stream.getvalue()
    assert line.endswith(f" 7 {message}\n")


def test_now_ms_tracks_wall_clock():
    before = int(time.time() * 1000)
    value = now_ms()
    after = int(time.time() * 1000)
    assert before - 1 <= value <= after + 1


def test_now_ms_does_not_go_backwards():
    first = now_ms()
    second = now_ms()
    assert second >= first


def test_sleep_ms_waits_full_duration():
    start = time.monotonic()
    completed = sleep_ms(30)
    elapsed_ms = (time.monotonic() - start) * 1000
    assert completed is True
    assert elapsed_ms >= 28


def test_sleep_ms_zero_returns_at_once():
    assert sleep_ms(0, lambda: True) is True


def test_sleep_ms_stops_early():
    start = time.monotonic()
    completed = sleep_ms(5000, lambda: True)
    elapsed = time.monotonic() - start
    assert completed is False
    assert elapsed < 1.0


def test_sleep_ms_stops_when_flag_flips():
    flag = threading.Event()
    timer = threading.Timer(0.02, flag.set)
    timer.start()
    start = time.monotonic()
    completed = sleep_ms(5000, flag.is_set)
    timer.join()
    assert completed is False
    assert time.monotonic() - start < 2.0


def _parse(line):
    elapsed, ident, message = line.split(" ", 2)
    return int(elapsed), int(ident), message


def test_write_formats_line():
    stream = io.StringIO()
    log = EventLog(stream, now_ms() - 1000)
    assert log.write(3, Action.EATING) is True
    elapsed, ident, message = _parse(stream.getvalue().rstrip("\n"))
    assert stream.getvalue().endswith("\n")
    assert elapsed >= 1000
    assert ident == 3
    assert message == "is eating"


def test_entries_in_order():
    stream = io.StringIO()
    log = EventLog(stream, now_ms())
    log.write(1, Action.TAKEN_FORK)
    log.write(2, Action.SLEEPING)
    log.write(1, Action.THINKING)
    lines = [_parse(line) for line in stream.getvalue().splitlines()]
    assert [(i, m) for _, i, m in lines] == [
        (1, "has taken a fork"),
        (2, "is sleeping"),
        (1, "is thinking"),
    ]
    times = [t for t, _, _ in lines]
    assert times == sorted(times)


def test_death_closes_log():
    stream = io.StringIO()
    log = EventLog(stream, now_ms())
    assert log.closed is False
    assert log.write(4, Action.DIED) is True
    assert log.closed is True
    assert log.write(5, Action.EATING) is False
    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    assert _parse(lines[0])[1:] == (4, "died")


def test_restart_resets_start_time():
    log = EventLog(io.StringIO(), 0)
    before = now_ms()
    new_start = log.restart()
    assert new_start >= before
    assert log.start_time == new_start


def test_lock_is_reentrant_around_write():
    stream = io.StringIO()
    log = EventLog(stream, now_ms())
    with log.lock:
        assert log.write(1, Action.THINKING) is True
    assert stream.getvalue().endswith("1 is thinking\n")


def test_concurrent_writes_keep_lines_whole():
    stream = io.StringIO()
    log = EventLog(stream, now_ms())

    def worker(ident):
        for _ in range(50):
            log.write(ident, Action.TAKEN_FORK)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    lines = stream.getvalue().splitlines()
    assert len(lines) == 200
    assert all(_parse(line)[2] == "has taken a fork" for line in lines)