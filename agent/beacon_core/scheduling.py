"""
Timers for the scheduler.

FixedDelayTimer waits `period` after each run finishes, so a slow tick
pushes the next one back instead of overlapping it. Cancel is immediate
for a waiting timer; a running tick is allowed to finish but never re-arms.
"""

import threading

from .config import log


class FixedDelayTimer:

    def __init__(self, name, period, fn, initial_delay=None):
        self.name = name
        self.period = period
        self._fn = fn
        self._initial_delay = period if initial_delay is None else initial_delay
        self._stop = threading.Event()
        self._thread = None

    @property
    def active(self) -> bool:
        return self._thread is not None and not self._stop.is_set()

    def start(self):
        if self._thread is not None:
            raise RuntimeError(f"Timer {self.name} already started")
        self._thread = threading.Thread(
            target=self._run, name=f"beacon-{self.name}", daemon=True,
        )
        self._thread.start()
        log.debug("Timer %s armed every %ss", self.name, self.period)
        return self

    def cancel(self):
        self._stop.set()

    def join(self, timeout=None):
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self):
        delay = self._initial_delay
        while not self._stop.wait(delay):
            try:
                self._fn()
            except Exception as e:
                log.error("Timer %s tick error: %s", self.name, e, exc_info=True)
            delay = self.period


class OneShotTimer:
    """Runs fn once after `delay` unless cancelled first."""

    def __init__(self, name, delay, fn):
        self.name = name
        self._fn = fn
        self._timer = threading.Timer(delay, self._run)
        self._timer.name = f"beacon-{name}"
        self._timer.daemon = True

    def start(self):
        self._timer.start()
        return self

    def cancel(self):
        self._timer.cancel()

    def join(self, timeout=None):
        self._timer.join(timeout)

    def _run(self):
        try:
            self._fn()
        except Exception as e:
            log.error("Timer %s error: %s", self.name, e, exc_info=True)
