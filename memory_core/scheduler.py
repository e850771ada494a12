from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledCall:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    generation: Optional[int] = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """Single-threaded timer queue driven by an explicit clock.

    Nothing runs on its own: callers push time forward with `advance(dt)` and
    every callback that falls due inside that window runs in due order, ties
    broken by scheduling order. Callbacks may schedule further callbacks; those
    run in the same `advance` call if they fall due before the window closes.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: List[ScheduledCall] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None], generation: Optional[int] = None) -> ScheduledCall:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        call = ScheduledCall(self._now + delay, next(self._seq), callback, generation)
        heapq.heappush(self._queue, call)
        return call

    def cancel_generation(self, generation: int) -> int:
        n = 0
        for call in self._queue:
            if not call.cancelled and call.generation == generation:
                call.cancelled = True
                n += 1
        return n

    def pending(self) -> int:
        return sum(1 for call in self._queue if not call.cancelled)

    def advance(self, dt: float) -> int:
        """Moves the clock forward by `dt` seconds; returns how many callbacks ran."""
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        target = self._now + dt
        ran = 0
        while self._queue and self._queue[0].due <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._now = max(self._now, call.due)
            call.callback()
            ran += 1
        self._now = target
        return ran


class WallClock:
    """Turns a monotonic time source into per-tick deltas."""

    def __init__(self, time_fn: Callable[[], float] = time.monotonic) -> None:
        self._time_fn = time_fn
        self._last = time_fn()

    def elapsed(self) -> float:
        now = self._time_fn()
        dt = max(0.0, now - self._last)
        self._last = now
        return dt
