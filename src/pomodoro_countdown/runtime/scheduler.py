"""Deadline arithmetic for the fixed one-second tick driver."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional

DEFAULT_TICK_INTERVAL_SECONDS = 1.0
DEFAULT_MAX_CATCH_UP_TICKS = 5


class TickScheduler:
    """Tells the runtime loop how many ticks are due on an injectable clock.

    The scheduler only does arithmetic; it never sleeps. Deadlines advance
    by whole intervals from the first one, so a loop that wakes late still
    fires one tick per elapsed interval instead of drifting.
    """

    def __init__(
        self,
        *,
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_catch_up: int = DEFAULT_MAX_CATCH_UP_TICKS,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")
        if max_catch_up < 1:
            raise ValueError("max_catch_up must be at least one")

        self._interval_seconds = float(interval_seconds)
        self._clock = clock
        self._max_catch_up = int(max_catch_up)
        self._logger = logger or logging.getLogger("runtime.scheduler")
        self._next_deadline: Optional[float] = None

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def next_deadline(self) -> Optional[float]:
        return self._next_deadline

    def start(self, now: Optional[float] = None) -> None:
        now = self._clock() if now is None else now
        self._next_deadline = now + self._interval_seconds

    def seconds_until_next(self, now: Optional[float] = None) -> float:
        if self._next_deadline is None:
            return self._interval_seconds
        now = self._clock() if now is None else now
        return max(0.0, self._next_deadline - now)

    def pop_due(self, now: Optional[float] = None) -> int:
        if self._next_deadline is None:
            return 0

        now = self._clock() if now is None else now
        if now < self._next_deadline:
            return 0

        due = int(math.floor((now - self._next_deadline) / self._interval_seconds)) + 1
        self._next_deadline += due * self._interval_seconds
        if due > self._max_catch_up:
            # Ticks past the cap are dropped, not deferred; after a long
            # stall the countdown lags wall time by the dropped count.
            self._logger.warning(
                "Tick loop fell behind by %d ticks; firing %d",
                due,
                self._max_catch_up,
            )
            return self._max_catch_up
        return due
