from side_tree.core.services.refresh_scheduler import DebouncedRefresh


class FakeScheduler:
    """Tk-like ``after``/``after_cancel`` pair whose timers fire on demand."""

    def __init__(self):
        self.timers = {}
        self.delays = []
        self._next = 0

    def after(self, delay_ms, callback):
        self._next += 1
        self.timers[self._next] = callback
        self.delays.append(delay_ms)
        return f"after#{self._next}"

    def after_cancel(self, handle):
        self.timers.pop(int(handle.split("#")[1]), None)

    def fire_all(self):
        for key in sorted(self.timers):
            self.timers.pop(key)()


def _make(scheduler, calls, delay_ms=50):
    return DebouncedRefresh(
        lambda: calls.append("run"),
        delay_ms=delay_ms,
        after=scheduler.after,
        after_cancel=scheduler.after_cancel,
        name="test refresh",
    )


def test_schedule_arms_a_single_timer():
    scheduler, calls = FakeScheduler(), []
    refresh = _make(scheduler, calls)
    assert refresh.schedule() is True
    assert refresh.pending
    assert scheduler.delays == [50]
    assert calls == []


def test_requests_while_pending_are_coalesced():
    scheduler, calls = FakeScheduler(), []
    refresh = _make(scheduler, calls)
    refresh.schedule()
    assert refresh.schedule() is False
    assert refresh.schedule() is False
    assert len(scheduler.timers) == 1
    assert refresh.coalesced == 2

    scheduler.fire_all()
    assert calls == ["run"]
    assert refresh.runs == 1
    assert refresh.coalesced == 0
    assert not refresh.pending


def test_schedule_after_run_arms_a_new_timer():
    scheduler, calls = FakeScheduler(), []
    refresh = _make(scheduler, calls)
    refresh.schedule()
    scheduler.fire_all()
    assert refresh.schedule() is True
    scheduler.fire_all()
    assert calls == ["run", "run"]


def test_cancel_drops_pending_run():
    scheduler, calls = FakeScheduler(), []
    refresh = _make(scheduler, calls)
    assert refresh.cancel() is False
    refresh.schedule()
    assert refresh.cancel() is True
    assert scheduler.timers == {}
    scheduler.fire_all()
    assert calls == []


def test_negative_delay_is_clamped():
    scheduler, calls = FakeScheduler(), []
    refresh = _make(scheduler, calls, delay_ms=-10)
    assert refresh.delay_ms == 0
