"""Tests for transition events on elements hidden mid-transition."""

from conformance_harness.assertions import (
    assert_equals,
    assert_false,
    assert_unreached,
)
from conformance_harness.controller import AsyncTestController
from conformance_harness.events import Event
from conformance_harness.harness import Harness
from conformance_harness.suites.css_transitions.element import (
    SimulatedElement,
    TransitionEvent,
)

TRANSITION_DURATION = 2000
HIDE_AT = 1000
CHECK_AT = TRANSITION_DURATION + 100


def define_tests(harness: Harness) -> None:
    """Register the css-transitions tests on `harness`."""

    @harness.define_async_test("transitionend does not fire after display:none")
    def hidden_mid_transition(t: AsyncTestController) -> None:
        element = SimulatedElement(harness.timers)
        ended = False

        def on_end(event: Event) -> None:
            nonlocal ended
            ended = True
            assert_unreached("transitionend fired on a hidden element")

        def hide() -> None:
            element.set_display("none")
            assert_false(ended, "transitionend fired before the element was hidden")

        def check() -> None:
            assert_false(ended, "transitionend fired after the element was hidden")

        element.add_event_listener("transitionend", t.step_func(on_end))
        t.start()
        element.start_transition("width", TRANSITION_DURATION)
        t.step_timeout(hide, HIDE_AT)
        harness.timers.set_timeout(t.step_func_done(check), CHECK_AT)

    @harness.define_async_test("transitioncancel fires when hidden mid-transition")
    def cancelled_when_hidden(t: AsyncTestController) -> None:
        element = SimulatedElement(harness.timers)

        def on_cancel(event: Event) -> None:
            assert isinstance(event, TransitionEvent)
            assert_equals(event.property_name, "width")
            assert_equals(event.elapsed_time, HIDE_AT / 1000)

        element.add_event_listener("transitioncancel", t.step_func_done(on_cancel))
        t.start()
        element.start_transition("width", TRANSITION_DURATION)
        t.step_timeout(lambda: element.set_display("none"), HIDE_AT)

    @harness.define_async_test("transitionend fires when the element stays visible")
    def visible_transition(t: AsyncTestController) -> None:
        element = SimulatedElement(harness.timers)

        def on_end(event: Event) -> None:
            assert isinstance(event, TransitionEvent)
            assert_equals(event.property_name, "width")
            assert_equals(event.elapsed_time, TRANSITION_DURATION / 1000)

        element.add_event_listener("transitionend", t.step_func_done(on_end))
        t.start()
        element.start_transition("width", TRANSITION_DURATION)
