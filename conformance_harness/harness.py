"""Entry point for defining and running asynchronous conformance tests."""

import logging
from collections.abc import Callable, Sequence
from typing import overload

from conformance_harness.clock.base import Clock
from conformance_harness.clock.timers import TimerRegistry
from conformance_harness.clock.virtual import VirtualClock
from conformance_harness.controller import AsyncTestController
from conformance_harness.models.config import HarnessConfig
from conformance_harness.models.result import SummaryEntry
from conformance_harness.registry import finalize_suite, init_suite
from conformance_harness.step import run_step

log = logging.getLogger(__name__)

type TestBody = Callable[[AsyncTestController], object]


class Harness:
    """Owns the clock, timers and registry of one suite run.

    By default the clock is virtual, so a run is deterministic and does not
    wait for real time to pass.
    """

    def __init__(
        self, config: HarnessConfig | None = None, clock: Clock | None = None
    ) -> None:
        self.config = config or HarnessConfig()
        self.clock = clock or VirtualClock()
        self.timers = TimerRegistry(self.clock)
        self.registry = init_suite()
        self._controllers: dict[str, AsyncTestController] = {}

    @overload
    def define_async_test(
        self, name: str, body: None = None
    ) -> Callable[[TestBody], TestBody]: ...

    @overload
    def define_async_test(self, name: str, body: TestBody) -> AsyncTestController: ...

    def define_async_test(
        self, name: str, body: TestBody | None = None
    ) -> AsyncTestController | Callable[[TestBody], TestBody]:
        """Register a test and run its body as the first step.

        The body receives the test's controller and is expected to call
        `start()` and, eventually, `done()`. Called without a body, this
        returns a decorator.

        Raises:
            DuplicateNameError: If a test with this name already exists

        """
        if body is None:

            def decorator(func: TestBody) -> TestBody:
                self.define_async_test(name, func)
                return func

            return decorator

        test = self.registry.register(name)
        controller = AsyncTestController(
            test=test,
            registry=self.registry,
            timers=self.timers,
            config=self.config,
        )
        self._controllers[name] = controller
        controller.arm_timeout()
        log.info("Registered test: %s", name)

        run_step(test, body, controller)
        return controller

    def controller(self, name: str) -> AsyncTestController:
        return self._controllers[name]

    async def run(self) -> Sequence[SummaryEntry]:
        """Drive the clock until every test has finished.

        Returns:
            Verdicts in registration order

        Raises:
            IncompleteSuiteError: If the clock ran dry with tests unfinished

        """
        log.info("Running %d test(s)...", len(self.registry))
        await self.clock.drain(until=lambda: self.registry.is_complete)
        return finalize_suite(self.registry)
