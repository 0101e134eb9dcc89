"""TickScheduler — virtual-time task queue driving both engines.

Time only moves when ``advance()`` is called, so tests step the clock
explicitly and the engine thread advances it by wall-clock deltas.
Callbacks run one at a time, in due-time order, on the caller's thread.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(order=True, slots=True)
class ScheduledTask:
    """Handle for a pending callback. Ordered by (due_ms, seq)."""

    due_ms: int
    seq: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple = field(default=(), compare=False)
    interval_ms: int | None = field(default=None, compare=False)
    label: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)

    @property
    def repeating(self) -> bool:
        return self.interval_ms is not None


class TickScheduler:
    """Single-threaded timer queue with a millisecond virtual clock."""

    __slots__ = ("_now_ms", "_heap", "_seq")

    def __init__(self, start_ms: int = 0) -> None:
        self._now_ms = start_ms
        self._heap: list[ScheduledTask] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending(self) -> int:
        return sum(1 for t in self._heap if not t.cancelled)

    @property
    def next_due_ms(self) -> int | None:
        self._discard_cancelled()
        return self._heap[0].due_ms if self._heap else None

    # -- scheduling --

    def call_later(self, delay_ms: int, callback: Callable[..., Any], *args: Any, label: str = "") -> ScheduledTask:
        """Run ``callback(*args)`` once, ``delay_ms`` from now."""
        if delay_ms < 0:
            raise ValueError(f"delay must be >= 0, got {delay_ms}")
        task = ScheduledTask(
            due_ms=self._now_ms + delay_ms, seq=next(self._seq),
            callback=callback, args=args, label=label,
        )
        heapq.heappush(self._heap, task)
        return task

    def call_every(self, interval_ms: int, callback: Callable[..., Any], *args: Any, label: str = "") -> ScheduledTask:
        """Run ``callback(*args)`` every ``interval_ms`` until cancelled."""
        if interval_ms <= 0:
            raise ValueError(f"interval must be > 0, got {interval_ms}")
        task = ScheduledTask(
            due_ms=self._now_ms + interval_ms, seq=next(self._seq),
            callback=callback, args=args, interval_ms=interval_ms, label=label,
        )
        heapq.heappush(self._heap, task)
        return task

    @staticmethod
    def cancel(task: ScheduledTask | None) -> None:
        if task is not None:
            task.cancelled = True

    # -- running --

    def advance(self, ms: int) -> int:
        """Move the clock forward ``ms`` and fire every task that falls due.

        Tasks scheduled by a callback fire in the same call if they fall
        due inside the window. Returns the number of callbacks fired.
        """
        if ms < 0:
            raise ValueError(f"cannot advance by a negative amount ({ms})")
        target = self._now_ms + ms
        fired = 0
        while self._heap and self._heap[0].due_ms <= target:
            task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            self._now_ms = task.due_ms
            if task.repeating:
                task.due_ms += task.interval_ms
                task.seq = next(self._seq)
                heapq.heappush(self._heap, task)
            task.callback(*task.args)
            fired += 1
        self._now_ms = target
        if fired:
            logger.debug("Advanced to %d ms, fired %d task(s)", target, fired)
        return fired

    def clear(self) -> None:
        """Drop every pending task without running it."""
        for task in self._heap:
            task.cancelled = True
        self._heap.clear()

    def _discard_cancelled(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
