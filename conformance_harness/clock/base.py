"""Abstract base for the clock that drives scheduled callbacks."""

import heapq
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True, order=True)
class ScheduledCallback:
    """A unit of deferred work ordered by (fire time, sequence)."""

    fire_time: float
    sequence: int
    callback: Callable[[], object] = field(compare=False)


class Clock(ABC):
    """Priority queue of callbacks keyed by logical fire time.

    Callbacks with a smaller fire time run first; callbacks sharing a fire
    time run in scheduling order. Subclasses supply the time source and the
    mechanism that calls `fire` once the earliest callback is due.

    While suspended, the base time is frozen and nothing fires. The suspended
    span is added to a suspension offset on resume, so the base time picks up
    where it stopped.
    """

    def __init__(self) -> None:
        self._queue: list[ScheduledCallback] = []
        self._scheduled: dict[int, ScheduledCallback] = {}
        self._next_sequence = 1
        self._suspended_since: float | None = None
        self._suspension_offset = 0.0

    @abstractmethod
    def _current_time(self) -> float:
        """Return the raw time source reading in milliseconds."""

    @abstractmethod
    def _request_fire(self, delay: float) -> None:
        """Arrange for `fire` to be called after `delay` milliseconds."""

    def _cancel_fire(self) -> None:
        """Withdraw a pending `fire` request, if the driver keeps one."""

    @abstractmethod
    async def drain(self, until: Callable[[], bool] | None = None) -> None:
        """Run callbacks until none remain scheduled or `until()` holds."""

    @property
    def now(self) -> float:
        """Current base time in milliseconds."""
        if self._suspended_since is not None:
            return self._suspended_since - self._suspension_offset
        return self._current_time() - self._suspension_offset

    @property
    def suspended(self) -> bool:
        return self._suspended_since is not None

    @property
    def pending(self) -> int:
        """Number of callbacks still scheduled."""
        return len(self._scheduled)

    @property
    def next_fire_time(self) -> float | None:
        """Fire time of the earliest live callback, or None when idle."""
        while self._queue and self._queue[0].sequence not in self._scheduled:
            heapq.heappop(self._queue)
        return self._queue[0].fire_time if self._queue else None

    def schedule(self, callback: Callable[[], object], delay: float = 0) -> int:
        """Schedule `callback` to run `delay` milliseconds from now.

        Returns:
            Handle that can be passed to `unschedule`

        """
        entry = ScheduledCallback(
            fire_time=self.now + max(0.0, delay),
            sequence=self._next_sequence,
            callback=callback,
        )
        self._next_sequence += 1
        self._scheduled[entry.sequence] = entry
        heapq.heappush(self._queue, entry)
        log.debug("Scheduled callback %d for t=%.1f", entry.sequence, entry.fire_time)

        if self.next_fire_time == entry.fire_time:
            self._arm()
        return entry.sequence

    def unschedule(self, handle: int) -> None:
        """Cancel a scheduled callback. Unknown handles are ignored."""
        entry = self._scheduled.pop(handle, None)
        if entry is None:
            return
        log.debug("Unscheduled callback %d", handle)
        self._arm()

    def fire(self, base_time: float | None = None) -> int:
        """Invoke every callback due at `base_time` (default: now).

        Callbacks scheduled while the batch runs are left for a later call,
        even when they are already due. A callback that raises is logged and
        the rest of the batch still runs.

        Returns:
            Number of callbacks invoked

        """
        if self.suspended:
            return 0

        if base_time is None:
            base_time = self.now
        batch: list[ScheduledCallback] = []
        while (fire_time := self.next_fire_time) is not None and fire_time <= base_time:
            entry = heapq.heappop(self._queue)
            del self._scheduled[entry.sequence]
            batch.append(entry)

        try:
            for entry in batch:
                log.debug("Firing callback %d at t=%.1f", entry.sequence, base_time)
                try:
                    entry.callback()
                except Exception:
                    log.exception("Callback %d raised", entry.sequence)
        finally:
            self._arm()
        return len(batch)

    def suspend(self) -> None:
        """Freeze the base time and stop firing callbacks."""
        if self.suspended:
            raise RuntimeError("Clock is already suspended")
        self._suspended_since = self._current_time()
        self._cancel_fire()

    def resume(self) -> None:
        """Resume firing, offsetting the base time by the suspended span."""
        if self._suspended_since is None:
            raise RuntimeError("Clock is not suspended")
        self._suspension_offset += self._current_time() - self._suspended_since
        self._suspended_since = None
        self._arm()

    def _arm(self) -> None:
        if self.suspended:
            return
        if (fire_time := self.next_fire_time) is None:
            self._cancel_fire()
            return
        self._request_fire(max(0.0, fire_time - self.now))
