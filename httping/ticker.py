import threading
import time
from datetime import timedelta
from typing import Callable

# Upper bound for a single blocking wait; longer periods are waited out in slices.
MAX_WAIT_SECONDS = 3600.0


class Ticker:
    """
    Fixed-rate ticker driven by a monotonic clock.

    Ticks never queue up: if the caller comes back late, exactly one tick is pending and fires
    at once, the missed ones are dropped, and later ticks stay on the original schedule.
    """

    def __init__(self, interval: timedelta, clock: Callable[[], float] = time.monotonic) -> None:
        self._period = interval.total_seconds()
        if self._period <= 0:
            raise ValueError(f"non-positive interval {interval} for Ticker")
        self._clock = clock
        self._next_tick = clock() + self._period

    def wait(self, cancel: threading.Event) -> bool:
        """
        wait blocks until the next tick and returns True, or returns False once cancel is set.

        Cancellation is checked first, so it wins over a tick that is already due.
        """
        while not cancel.is_set():
            now = self._clock()
            remaining = self._next_tick - now
            if remaining <= 0:
                self._advance(now)
                return True
            cancel.wait(min(remaining, MAX_WAIT_SECONDS))
        return False

    def _advance(self, now: float) -> None:
        missed = int((now - self._next_tick) // self._period)
        self._next_tick += (missed + 1) * self._period
