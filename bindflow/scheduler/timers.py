"""Timer abstractions for the change scheduler.

- TimerService Protocol for dependency injection.
- ManualTimerService: a virtual clock for tests and offline tools.
- AsyncioTimerService: timers on a running asyncio event loop.
"""

import asyncio
import heapq
import itertools
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None: ...


class TimerService(Protocol):
    """Minimal timer protocol used by the scheduler."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimer:
    """Handle returned by ManualTimerService."""

    def __init__(self, due_ms: int, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimerService:
    """Virtual clock: time only moves when `advance` is called.

    Callbacks due at the same instant run in the order they were scheduled.
    """

    def __init__(self, start_ms: int = 0):
        self._now = start_ms
        self._heap: list[tuple[int, int, ManualTimer]] = []
        self._seq = itertools.count()

    def now_ms(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + max(0, int(delay_ms)), callback)
        heapq.heappush(self._heap, (timer.due_ms, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for _, _, timer in self._heap if not timer.cancelled)

    def advance(self, ms: int) -> int:
        """Move the clock forward, running every callback that falls due.

        Callbacks scheduled while advancing run too if they fall due in range.

        Returns:
            Number of callbacks run.
        """
        target = self._now + max(0, int(ms))
        ran = 0

        while self._heap and self._heap[0][0] <= target:
            due, _, timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            self._now = due
            timer.callback()
            ran += 1

        self._now = target
        return ran

    def run_until_idle(self, max_ms: int = 60_000) -> int:
        """Advance until no timer is pending, up to `max_ms` of virtual time.

        Returns:
            Number of callbacks run.
        """
        deadline = self._now + max_ms
        ran = 0

        while self._heap and self._now < deadline:
            next_due = min(
                (due for due, _, timer in self._heap if not timer.cancelled),
                default=None,
            )
            if next_due is None:
                self._heap.clear()
                break
            ran += self.advance(min(next_due, deadline) - self._now)

        return ran


class AsyncioTimerService:
    """Timers backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(
        self, delay_ms: int, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0, delay_ms) / 1000.0, callback)
