from __future__ import annotations

import threading
import time

from beacon_core.scheduling import FixedDelayTimer, OneShotTimer


def test_fixed_delay_timer_repeats_until_cancelled() -> None:
    calls: list[float] = []
    done = threading.Event()

    def tick() -> None:
        calls.append(time.monotonic())
        if len(calls) >= 3:
            done.set()

    timer = FixedDelayTimer("t", 0.01, tick).start()
    assert done.wait(2.0)
    timer.cancel()
    timer.join(1.0)
    count = len(calls)
    time.sleep(0.05)

    assert len(calls) == count
    assert not timer.active


def test_fixed_delay_timer_survives_tick_errors() -> None:
    calls = []
    done = threading.Event()

    def tick() -> None:
        calls.append(1)
        if len(calls) >= 2:
            done.set()
        raise RuntimeError("boom")

    timer = FixedDelayTimer("t", 0.01, tick).start()
    try:
        assert done.wait(2.0)
    finally:
        timer.cancel()


def test_fixed_delay_ticks_never_overlap() -> None:
    running = 0
    peak = 0
    calls = 0
    lock = threading.Lock()
    done = threading.Event()

    def slow_tick() -> None:
        nonlocal running, peak, calls
        with lock:
            running += 1
            peak = max(peak, running)
        time.sleep(0.03)
        with lock:
            running -= 1
            calls += 1
            if calls >= 3:
                done.set()

    timer = FixedDelayTimer("t", 0.001, slow_tick).start()
    try:
        assert done.wait(2.0)
    finally:
        timer.cancel()
    assert peak == 1


def test_cancel_before_first_run() -> None:
    calls = []
    timer = FixedDelayTimer("t", 0.05, lambda: calls.append(1)).start()
    timer.cancel()
    timer.join(1.0)
    assert calls == []


def test_one_shot_runs_once() -> None:
    done = threading.Event()
    OneShotTimer("once", 0.01, done.set).start()
    assert done.wait(2.0)


def test_one_shot_cancel() -> None:
    calls = []
    timer = OneShotTimer("once", 0.05, lambda: calls.append(1)).start()
    timer.cancel()
    timer.join(1.0)
    assert calls == []
