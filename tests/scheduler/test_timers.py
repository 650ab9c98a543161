"""Tests for timer services."""

import asyncio

from bindflow.scheduler.timers import AsyncioTimerService, ManualTimerService


class TestManualTimerService:
    def test_runs_due_callbacks_only(self):
        timers = ManualTimerService()
        fired = []
        timers.call_later(10, lambda: fired.append("a"))
        timers.call_later(30, lambda: fired.append("b"))

        assert timers.advance(10) == 1
        assert fired == ["a"]
        assert timers.now_ms() == 10
        assert timers.pending == 1

    def test_same_due_time_runs_in_order(self):
        timers = ManualTimerService()
        fired = []
        for name in "abc":
            timers.call_later(5, lambda name=name: fired.append(name))

        timers.advance(5)

        assert fired == ["a", "b", "c"]

    def test_cancelled_timer_does_not_run(self):
        timers = ManualTimerService()
        fired = []
        handle = timers.call_later(5, lambda: fired.append("x"))

        handle.cancel()
        timers.advance(10)

        assert fired == []
        assert timers.pending == 0

    def test_callbacks_scheduled_while_advancing(self):
        timers = ManualTimerService()
        fired = []
        timers.call_later(5, lambda: timers.call_later(5, lambda: fired.append("late")))

        timers.advance(10)

        assert fired == ["late"]

    def test_run_until_idle(self):
        timers = ManualTimerService(start_ms=100)
        fired = []
        timers.call_later(1000, lambda: fired.append(timers.now_ms()))

        timers.run_until_idle()

        assert fired == [1100]
        assert timers.pending == 0


class TestAsyncioTimerService:
    def test_fires_on_running_loop(self):
        async def scenario():
            fired = asyncio.Event()
            AsyncioTimerService().call_later(1, fired.set)
            await asyncio.wait_for(fired.wait(), timeout=1)
            return fired.is_set()

        assert asyncio.run(scenario())

    def test_cancel(self):
        async def scenario():
            fired = []
            handle = AsyncioTimerService().call_later(1, lambda: fired.append(1))
            handle.cancel()
            await asyncio.sleep(0.02)
            return fired

        assert asyncio.run(scenario()) == []
