"""Tests for defining and running tests on the harness."""

import pytest

from conformance_harness.assertions import assert_false, assert_true
from conformance_harness.clock.loop import AsyncioClock
from conformance_harness.clock.virtual import VirtualClock
from conformance_harness.controller import AsyncTestController
from conformance_harness.errors import DuplicateNameError, IncompleteSuiteError
from conformance_harness.events import Event, EventTarget
from conformance_harness.harness import Harness
from conformance_harness.models.result import TestState


def define_ended_test(harness: Harness, target: EventTarget) -> None:
    """Register T1: `ended` must stay false until t=2100."""

    def body(t: AsyncTestController) -> None:
        ended = False

        def on_ended(event: Event) -> None:
            nonlocal ended
            ended = True
            assert_false(ended, "ended event fired")

        target.add_event_listener("ended", t.step_func(on_ended))
        t.start()
        t.step_timeout(lambda: assert_false(ended, "ended event fired"), 1000)
        harness.timers.set_timeout(t.step_func_done(), 2100)

    harness.define_async_test("T1", body)


async def test_event_never_fires_passes(harness: Harness) -> None:
    """The event never fires, so the test passes at t=2100."""
    define_ended_test(harness, EventTarget())

    summary = await harness.run()

    assert summary[0].state is TestState.PASSED
    assert harness.clock.now == 2100


async def test_event_firing_fails_at_done(
    harness: Harness, clock: VirtualClock
) -> None:
    """A listener asserting at t=500 fails the test once done() runs."""
    target = EventTarget()
    define_ended_test(harness, target)
    clock.schedule(lambda: target.dispatch_event(Event(type="ended")), 500)

    clock.advance(500)
    assert harness.controller("T1").state is TestState.RUNNING
    assert len(harness.controller("T1").test.failures) == 1

    summary = await harness.run()

    assert summary[0].state is TestState.FAILED
    assert summary[0].messages[0] == (
        "assert_false: ended event fired expected false got True"
    )


async def test_test_without_done_times_out(harness: Harness) -> None:
    """A body that never calls done() ends timed_out."""
    harness.define_async_test("forgotten", lambda t: t.start())

    summary = await harness.run()

    assert summary[0].state is TestState.TIMED_OUT
    assert summary[0].timed_out
    assert harness.clock.now == 5000


async def test_body_exception_is_recorded(harness: Harness) -> None:
    """A body that raises is recorded and the test times out."""

    def body(t: AsyncTestController) -> None:
        raise RuntimeError("broken body")

    harness.define_async_test("broken", body)
    summary = await harness.run()

    assert summary[0].state is TestState.TIMED_OUT
    assert summary[0].messages[0] == "RuntimeError: broken body"


async def test_body_can_finish_synchronously(harness: Harness) -> None:
    """Tests may start and finish inside the body."""

    def body(t: AsyncTestController) -> None:
        t.start()
        assert_true(True)
        t.done()

    controller = harness.define_async_test("sync", body)

    assert controller.state is TestState.PASSED
    assert harness.clock.pending == 0


async def test_decorator_form(harness: Harness) -> None:
    """define_async_test can be used as a decorator."""

    @harness.define_async_test("decorated")
    def body(t: AsyncTestController) -> None:
        t.start()
        t.step_timeout(t.done, 10)

    summary = await harness.run()

    assert callable(body)
    assert [(entry.name, entry.state) for entry in summary] == [
        ("decorated", TestState.PASSED)
    ]


def test_duplicate_name_raises(harness: Harness) -> None:
    """Names must be unique."""
    harness.define_async_test("T1", lambda t: None)

    with pytest.raises(DuplicateNameError):
        harness.define_async_test("T1", lambda t: None)


async def test_tests_are_isolated(harness: Harness) -> None:
    """A failing test does not affect another."""

    def failing(t: AsyncTestController) -> None:
        t.start()
        assert_true(False, "always")
        t.done()

    def passing(t: AsyncTestController) -> None:
        t.start()
        t.step_timeout(t.done, 100)

    harness.define_async_test("failing", failing)
    harness.define_async_test("passing", passing)

    summary = await harness.run()

    assert [entry.state for entry in summary] == [
        TestState.FAILED,
        TestState.PASSED,
    ]


async def test_run_stops_when_complete(harness: Harness) -> None:
    """Dangling intervals do not keep the run going."""

    def body(t: AsyncTestController) -> None:
        t.start()
        harness.timers.set_interval(lambda: None, 50)
        t.step_timeout(t.done, 200)

    harness.define_async_test("interval", body)
    await harness.run()

    assert harness.clock.now == 200


async def test_run_raises_when_clock_cannot_finish(
    harness: Harness, clock: VirtualClock
) -> None:
    """A suspended clock leaves tests unfinished."""
    harness.define_async_test("stuck", lambda t: t.start())
    clock.suspend()

    with pytest.raises(IncompleteSuiteError):
        await harness.run()


async def test_late_steps_are_ignored(harness: Harness, clock: VirtualClock) -> None:
    """Listeners firing after done() are inert."""
    target = EventTarget()
    calls: list[str] = []

    def body(t: AsyncTestController) -> None:
        target.add_event_listener("late", t.step_func(lambda e: calls.append("ran")))
        t.start()
        t.done()

    harness.define_async_test("finished", body)
    clock.schedule(lambda: target.dispatch_event(Event(type="late")), 100)
    clock.run_until_idle()

    assert calls == []
    assert harness.controller("finished").state is TestState.PASSED


async def test_raising_raw_timer_does_not_break_other_tests(
    harness: Harness,
) -> None:
    """A timer outside any step that raises leaves other tests unaffected."""

    def bad(t: AsyncTestController) -> None:
        t.start()
        harness.timers.set_timeout(lambda: 1 / 0, 100)

    def good(t: AsyncTestController) -> None:
        t.start()
        t.step_timeout(t.done, 100)

    harness.define_async_test("bad", bad)
    harness.define_async_test("good", good)

    summary = await harness.run()

    assert [(entry.name, entry.state) for entry in summary] == [
        ("bad", TestState.TIMED_OUT),
        ("good", TestState.PASSED),
    ]


async def test_run_on_suspended_realtime_clock_raises() -> None:
    """A suspended event-loop clock ends the run as incomplete."""
    clock = AsyncioClock()
    harness = Harness(clock=clock)
    harness.define_async_test("stuck", lambda t: t.start())
    clock.suspend()

    with pytest.raises(IncompleteSuiteError):
        await harness.run()
