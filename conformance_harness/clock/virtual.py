"""Deterministic clock whose time only moves when told to."""

from collections.abc import Callable

from conformance_harness.clock.base import Clock


class VirtualClock(Clock):
    """Clock driven by explicit `advance` calls.

    Time jumps straight to each due callback, so a run covering minutes of
    logical time completes instantly and replays identically.
    """

    def __init__(self, start: float = 0.0) -> None:
        super().__init__()
        self._time = start

    def _current_time(self) -> float:
        return self._time

    def _request_fire(self, delay: float) -> None:
        """Firing happens inside `advance`, nothing to arrange."""

    def advance(self, delta: float) -> None:
        """Move time forward by `delta` ms, firing callbacks on the way."""
        if delta < 0:
            raise ValueError("Cannot move a clock backwards")
        target = self._time + delta

        while not self.suspended:
            fire_time = self.next_fire_time
            if fire_time is None or fire_time + self._suspension_offset > target:
                break
            self._time = max(self._time, fire_time + self._suspension_offset)
            self.fire(fire_time)

        self._time = target

    def advance_to(self, time: float) -> None:
        """Advance until the base time reaches `time`."""
        self.advance(max(0.0, time - self.now))

    def run_until_idle(
        self,
        limit: float | None = None,
        until: Callable[[], bool] | None = None,
    ) -> None:
        """Fire callbacks in order until none remain.

        Args:
            limit: Stop before callbacks due after this base time
            until: Stop as soon as this returns true

        """
        while not self.suspended and not (until and until()):
            fire_time = self.next_fire_time
            if fire_time is None or (limit is not None and fire_time > limit):
                return
            self._time = max(self._time, fire_time + self._suspension_offset)
            self.fire(fire_time)

    async def drain(self, until: Callable[[], bool] | None = None) -> None:
        """Run scheduled callbacks without waiting for real time."""
        self.run_until_idle(until=until)
