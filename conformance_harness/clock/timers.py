"""setTimeout/setInterval style timers on top of a clock."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from conformance_harness.clock.base import Clock

log = logging.getLogger(__name__)

NESTING_CLAMP_LEVEL = 5
MIN_NESTED_DELAY = 4.0


def clamp_delay(nesting_level: int, delay: float) -> float:
    """Apply the lower bound for deeply nested timers."""
    lower_bound = MIN_NESTED_DELAY if nesting_level > NESTING_CLAMP_LEVEL else 0.0
    return max(lower_bound, delay)


@dataclass(kw_only=True)
class TimerTask:
    """A timer registered through `TimerRegistry`."""

    handle: int
    callback: Callable[..., object]
    args: tuple[Any, ...]
    interval: bool
    delay: float
    nesting_level: int = 0


class TimerRegistry:
    """Handle-based one-shot and repeating timers.

    Timers scheduled from inside a timer callback inherit its nesting level
    plus one; past `NESTING_CLAMP_LEVEL` their delay is raised to at least
    `MIN_NESTED_DELAY` ms. Repeating timers keep nesting across runs, so a
    zero-delay interval is clamped after a few runs; engines that reset the
    level before rescheduling never clamp intervals.

    A callback that raises is logged; one-shot cleanup and interval
    rescheduling still happen.
    """

    def __init__(self, clock: Clock) -> None:
        self.clock = clock
        self._next_handle = 1
        self._active: dict[int, int] = {}
        self._nesting_level = 0

    @property
    def active(self) -> int:
        """Number of timers that have not completed or been cleared."""
        return len(self._active)

    def set_timeout(
        self, callback: Callable[..., object], delay: float = 0, *args: Any
    ) -> int:
        """Run `callback(*args)` once after `delay` ms."""
        return self._create(callback, delay, args, interval=False)

    def set_interval(
        self, callback: Callable[..., object], delay: float = 0, *args: Any
    ) -> int:
        """Run `callback(*args)` every `delay` ms until cleared."""
        return self._create(callback, delay, args, interval=True)

    def clear_timer(self, handle: int) -> None:
        """Cancel a timer. Unknown or finished handles are ignored."""
        if (clock_handle := self._active.pop(handle, None)) is not None:
            self.clock.unschedule(clock_handle)

    def _create(
        self,
        callback: Callable[..., object],
        delay: float,
        args: tuple[Any, ...],
        *,
        interval: bool,
    ) -> int:
        handle = self._next_handle
        self._next_handle += 1
        task = TimerTask(
            handle=handle,
            callback=callback,
            args=args,
            interval=interval,
            delay=max(0.0, delay),
        )
        self._schedule(task, self._nesting_level)
        return handle

    def _schedule(self, task: TimerTask, nesting_level: int) -> None:
        delay = clamp_delay(nesting_level, task.delay)
        task.nesting_level = nesting_level + 1
        self._active[task.handle] = self.clock.schedule(
            lambda: self._invoke(task), delay
        )

    def _invoke(self, task: TimerTask) -> None:
        self._nesting_level = task.nesting_level
        try:
            task.callback(*task.args)
        except Exception:
            log.exception("Timer %d raised", task.handle)
        finally:
            self._nesting_level = 0

        # A repeating timer cleared by its own callback is not rescheduled.
        if task.handle not in self._active:
            return
        if task.interval:
            self._schedule(task, task.nesting_level)
        else:
            del self._active[task.handle]
