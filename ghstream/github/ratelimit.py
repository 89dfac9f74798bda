"""
Request rate limiting on top of pyrate-limiter

One limiter is meant to be shared by every iterator in the process (it is
passed in explicitly, never looked up globally). The bucket admits
``burst`` requests per window of ``burst / per_second`` seconds, which
with the default burst of 1 is one request every ``1 / per_second``
seconds. Acquisition never blocks inside the library: when the bucket is
full the caller sleeps on its cancel event for the delay the bucket
reports and tries again.
"""

import logging
import threading
import time
from typing import Callable, Optional

from pyrate_limiter import (
    AbstractClock,
    BucketFullException,
    Duration,
    InMemoryBucket,
    Limiter,
    Rate,
    RateItem,
)

from ghstream.errors import RateLimitWaitError

logger = logging.getLogger(__name__)

ITEM_NAME = "github"


class _SecondsClock(AbstractClock):
    """Adapt a float-seconds clock to the millisecond clock pyrate-limiter expects"""

    def __init__(self, clock: Callable[[], float]):
        self._clock = clock

    def now(self) -> int:
        return int(self._clock() * 1000)


class RateLimiter:
    """
    Thread-safe request limiter

    Example:
        limiter = RateLimiter(per_second=2, burst=1)
        limiter.wait()  # returns immediately
        limiter.wait()  # blocks ~0.5s
    """

    def __init__(
        self,
        per_second: float,
        burst: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize limiter with an empty bucket

        Args:
            per_second: Sustained request rate (must be positive)
            burst: Requests admitted back to back (must be at least 1)
            clock: Monotonic clock in seconds, injectable for tests
        """
        if per_second <= 0:
            raise ValueError(f"per_second must be positive, got {per_second}")
        if burst < 1:
            raise ValueError(f"burst must be at least 1, got {burst}")

        self.per_second = float(per_second)
        self.burst = burst
        self._clock = _SecondsClock(clock)

        window = max(1, round(burst * Duration.SECOND.value / self.per_second))
        self.rate = Rate(burst, window)
        self._bucket = InMemoryBucket([self.rate])
        self._limiter = Limiter(
            self._bucket,
            clock=self._clock,
            raise_when_fail=True,
            max_delay=None,
        )

    def _try_acquire(self) -> float:
        """Take a slot if one is free; otherwise return the delay in seconds"""
        try:
            self._limiter.try_acquire(ITEM_NAME)
            return 0.0
        except BucketFullException:
            waiting_ms = self._bucket.waiting(RateItem(ITEM_NAME, self._clock.now()))
            # A slot freed up between the two calls; retry straight away
            return max(waiting_ms, 1) / 1000

    def wait(
        self,
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Block until the request may be sent

        Args:
            cancel: Event that aborts the wait when set
            timeout: Deadline in seconds; fail fast if the slot is due later

        Raises:
            RateLimitWaitError: If cancelled or the deadline cannot be met
        """
        waited = 0.0

        while True:
            if cancel is not None and cancel.is_set():
                raise RateLimitWaitError("rate limit wait cancelled")

            delay = self._try_acquire()
            if delay <= 0:
                return

            if timeout is not None and waited + delay > timeout:
                raise RateLimitWaitError(
                    f"rate limit wait of {delay:.3f}s would exceed deadline of {timeout:.3f}s"
                )

            logger.debug("Rate limited, waiting %.3fs", delay)
            if cancel is None:
                time.sleep(delay)
            elif cancel.wait(delay):
                raise RateLimitWaitError("rate limit wait cancelled")
            waited += delay

    def __repr__(self) -> str:
        return f"RateLimiter(per_second={self.per_second}, burst={self.burst})"


class NoopRateLimiter:
    """Limiter that never blocks (tests, local fixtures)"""

    def wait(
        self,
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if cancel is not None and cancel.is_set():
            raise RateLimitWaitError("rate limit wait cancelled")

    def __repr__(self) -> str:
        return "NoopRateLimiter()"
