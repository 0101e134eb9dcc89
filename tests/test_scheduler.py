"""Tests for the virtual-time TickScheduler."""

import pytest

from minigames.engine.scheduler import TickScheduler


class TestOrdering:

    def test_fires_in_due_order(self):
        sched = TickScheduler()
        seen = []
        sched.call_later(300, seen.append, "c")
        sched.call_later(100, seen.append, "a")
        sched.call_later(200, seen.append, "b")
        assert sched.advance(1000) == 3
        assert seen == ["a", "b", "c"]

    def test_ties_fire_in_schedule_order(self):
        sched = TickScheduler()
        seen = []
        for name in ("first", "second", "third"):
            sched.call_later(50, seen.append, name)
        sched.advance(50)
        assert seen == ["first", "second", "third"]

    def test_clock_reads_due_time_inside_callback(self):
        sched = TickScheduler()
        seen = []
        sched.call_later(120, lambda: seen.append(sched.now_ms))
        sched.advance(500)
        assert seen == [120]
        assert sched.now_ms == 500

    def test_not_due_yet(self):
        sched = TickScheduler()
        seen = []
        sched.call_later(100, seen.append, 1)
        sched.advance(99)
        assert seen == []
        sched.advance(1)
        assert seen == [1]


class TestRepeating:

    def test_call_every_fires_each_interval(self):
        sched = TickScheduler()
        seen = []
        sched.call_every(200, lambda: seen.append(sched.now_ms))
        sched.advance(1000)
        assert seen == [200, 400, 600, 800, 1000]

    def test_cancel_from_inside_callback(self):
        sched = TickScheduler()
        seen = []

        def tick():
            seen.append(sched.now_ms)
            if len(seen) == 2:
                sched.cancel(task)

        task = sched.call_every(100, tick)
        sched.advance(1000)
        assert seen == [100, 200]
        assert sched.pending == 0

    def test_task_scheduled_by_callback_fires_in_same_window(self):
        sched = TickScheduler()
        seen = []
        sched.call_later(100, lambda: sched.call_later(50, seen.append, "nested"))
        sched.advance(200)
        assert seen == ["nested"]


class TestCancelAndErrors:

    def test_cancelled_task_never_fires(self):
        sched = TickScheduler()
        seen = []
        task = sched.call_later(10, seen.append, 1)
        sched.cancel(task)
        assert sched.advance(100) == 0
        assert seen == []

    def test_cancel_none_is_noop(self):
        TickScheduler.cancel(None)

    def test_next_due_skips_cancelled(self):
        sched = TickScheduler()
        early = sched.call_later(10, lambda: None)
        sched.call_later(30, lambda: None)
        sched.cancel(early)
        assert sched.next_due_ms == 30

    def test_clear_drops_everything(self):
        sched = TickScheduler()
        sched.call_every(10, lambda: None)
        sched.clear()
        assert sched.pending == 0
        assert sched.advance(100) == 0

    @pytest.mark.parametrize("call", [
        lambda s: s.advance(-1),
        lambda s: s.call_later(-5, lambda: None),
        lambda s: s.call_every(0, lambda: None),
    ])
    def test_invalid_arguments_rejected(self, call):
        with pytest.raises(ValueError):
            call(TickScheduler())
