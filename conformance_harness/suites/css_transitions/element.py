"""Simulated element that runs CSS transitions on harness timers."""

import logging
from dataclasses import dataclass

from conformance_harness.clock.timers import TimerRegistry
from conformance_harness.events import Event, EventTarget

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TransitionEvent(Event):
    """Event dispatched when a transition ends or is cancelled."""

    property_name: str
    elapsed_time: float  # seconds


@dataclass(frozen=True, kw_only=True)
class RunningTransition:
    timer: int
    started_at: float
    delay: float


class SimulatedElement(EventTarget):
    """Element whose transitions end on a timer unless it stops rendering.

    Setting `display` to "none" cancels every running transition: their
    `transitionend` never fires and `transitioncancel` is dispatched instead.
    """

    def __init__(self, timers: TimerRegistry) -> None:
        super().__init__()
        self.timers = timers
        self.display = "block"
        self._running: dict[str, RunningTransition] = {}

    @property
    def running_transitions(self) -> list[str]:
        return sorted(self._running)

    def start_transition(
        self, property_name: str, duration: float, delay: float = 0
    ) -> None:
        """Start transitioning `property_name` over `duration` ms."""
        if self.display == "none":
            log.debug("Not rendered, skipping transition of %s", property_name)
            return

        self._cancel(property_name)
        timer = self.timers.set_timeout(
            self._end, delay + duration, property_name, duration
        )
        self._running[property_name] = RunningTransition(
            timer=timer, started_at=self.timers.clock.now, delay=delay
        )
        log.debug("Transition started: %s over %gms", property_name, duration)

    def set_display(self, value: str) -> None:
        self.display = value
        if value == "none":
            for property_name in self.running_transitions:
                self._cancel(property_name)

    def _end(self, property_name: str, duration: float) -> None:
        del self._running[property_name]
        self.dispatch_event(
            TransitionEvent(
                type="transitionend",
                property_name=property_name,
                elapsed_time=duration / 1000,
            )
        )

    def _cancel(self, property_name: str) -> None:
        if (running := self._running.pop(property_name, None)) is None:
            return

        self.timers.clear_timer(running.timer)
        elapsed = self.timers.clock.now - running.started_at - running.delay
        self.dispatch_event(
            TransitionEvent(
                type="transitioncancel",
                property_name=property_name,
                elapsed_time=max(0.0, elapsed) / 1000,
            )
        )
