import threading

import pytest


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SteppingEvent(threading.Event):
    """Waiting on it moves the fake clock forward instead of sleeping."""

    def __init__(self, clock: FakeClock) -> None:
        super().__init__()
        self._clock = clock

    def wait(self, timeout=None):
        if not self.is_set() and timeout is not None:
            self._clock.advance(timeout)
        return self.is_set()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cancel(clock):
    return SteppingEvent(clock)
