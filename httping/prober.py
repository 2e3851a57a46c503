import logging
import queue
import threading
import time
from datetime import datetime, timedelta
from typing import Callable, Iterator

import requests

from httping.duration import format_duration
from httping.sample import FAILED_STATUS_CODE, Sample
from httping.ticker import Ticker

logger = logging.getLogger(__name__)

_CLOSED = object()


class Prober:
    """
    Prober sends one GET per tick to a single target and streams a Sample for each probe.

    The probe loop runs in a background thread and hands samples over through a queue of
    depth one: a finished probe waits there until the consumer takes the previous one, so
    emission is delayed but never dropped. Requests are sent without a timeout, so a server
    that never answers stalls the whole stream.
    """

    session: requests.Session

    def __init__(
        self,
        session: requests.Session,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.session = session
        self._clock = clock
        self._now = now

    def start(self, target: str, interval: timedelta, cancel: threading.Event) -> Iterator[Sample]:
        """
        start launches the probe loop and returns the stream of its samples.

        The stream ends once cancel is set. A probe already in flight at that point still
        completes and is emitted before the stream closes.
        """
        handoff: queue.Queue = queue.Queue(maxsize=1)
        failures: list[Exception] = []
        ticker = Ticker(interval, clock=self._clock)

        thread = threading.Thread(
            target=self._run,
            args=(target, ticker, cancel, handoff, failures),
            name="httping-prober",
            daemon=True,
        )
        logger.info(f"probing {target} every {format_duration(interval)}")
        thread.start()

        return self._drain(handoff, failures)

    def probe(self, target: str) -> Sample:
        """Issues a single GET to target. Network errors are logged and yield FAILED_STATUS_CODE."""
        timestamp = self._now()
        start = self._clock()

        try:
            # stream=True returns as soon as the headers are in; the body is never read.
            response = self.session.get(target, stream=True)
        except requests.RequestException as e:
            latency = self._elapsed_since(start)
            logger.error(f"probe to {target} failed: {e}")
            return Sample(timestamp=timestamp, status_code=FAILED_STATUS_CODE, latency=latency)

        latency = self._elapsed_since(start)
        response.close()
        logger.debug(f"probe to {target} returned {response.status_code} in {latency}")
        return Sample(timestamp=timestamp, status_code=response.status_code, latency=latency)

    def _run(
        self,
        target: str,
        ticker: Ticker,
        cancel: threading.Event,
        handoff: queue.Queue,
        failures: list[Exception],
    ) -> None:
        try:
            while ticker.wait(cancel):
                handoff.put(self.probe(target))
        except Exception as e:
            failures.append(e)
        finally:
            handoff.put(_CLOSED)
        logger.info(f"stopped probing {target}")

    def _drain(self, handoff: queue.Queue, failures: list[Exception]) -> Iterator[Sample]:
        while True:
            item = handoff.get()
            if item is _CLOSED:
                break
            yield item

        if failures:
            raise failures[0]

    def _elapsed_since(self, start: float) -> timedelta:
        return timedelta(seconds=self._clock() - start)
