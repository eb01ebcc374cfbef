"""Clock backed by the running asyncio event loop."""

import asyncio
import logging
from collections.abc import Callable

from conformance_harness.clock.base import Clock

log = logging.getLogger(__name__)


class AsyncioClock(Clock):
    """Clock that fires callbacks in real time on an asyncio event loop.

    Only the earliest callback is armed as a loop timer; the queue keeps its
    own ordering so callbacks sharing a fire time still run in scheduling
    order.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        poll_interval: float = 0.005,
    ) -> None:
        self._loop = loop
        self._armed: asyncio.TimerHandle | None = None
        self.poll_interval = poll_interval
        super().__init__()
        self._origin = self.loop.time()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _current_time(self) -> float:
        return (self.loop.time() - self._origin) * 1000

    def _request_fire(self, delay: float) -> None:
        self._cancel_fire()
        self._armed = self.loop.call_later(delay / 1000, self.fire)

    def _cancel_fire(self) -> None:
        if self._armed is not None:
            self._armed.cancel()
            self._armed = None

    async def drain(
        self,
        until: Callable[[], bool] | None = None,
        timeout: float | None = None,
    ) -> None:
        """Wait until no callbacks remain scheduled or `until()` holds.

        Returns early while the clock is suspended, since nothing can fire.

        Args:
            until: Stop waiting as soon as this returns true
            timeout: Maximum wait in seconds (default: no limit)

        Raises:
            TimeoutError: If callbacks remain after `timeout` seconds

        """
        deadline = None if timeout is None else self.loop.time() + timeout

        while self.pending and not (until and until()):
            if self.suspended:
                log.warning("Clock suspended with %d callback(s) pending", self.pending)
                return
            if deadline is not None and self.loop.time() >= deadline:
                raise TimeoutError(
                    f"{self.pending} callback(s) still scheduled "
                    f"after {timeout} seconds"
                )
            await asyncio.sleep(self.poll_interval)

        log.debug("Clock drained at t=%.1f", self.now)
