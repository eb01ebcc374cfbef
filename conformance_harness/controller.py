"""Lifecycle state machine for a single asynchronous test."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from conformance_harness.clock.timers import TimerRegistry
from conformance_harness.errors import InvalidStateError, TestTimeoutError
from conformance_harness.models.config import HarnessConfig
from conformance_harness.models.result import AssertionResult, TestState
from conformance_harness.registry import SuiteRegistry, Test
from conformance_harness.step import run_step

log = logging.getLogger(__name__)


class AsyncTestController:
    """Drives one test from pending through running to a verdict.

    Failing results never end a test by themselves. The verdict is decided by
    `done()`, or by the per-test timeout if `done()` is never reached.
    Every terminal transition is reported to the registry exactly once.
    """

    def __init__(
        self,
        test: Test,
        registry: SuiteRegistry,
        timers: TimerRegistry,
        config: HarnessConfig,
    ) -> None:
        self.test = test
        self.registry = registry
        self.timers = timers
        self.config = config
        self._timeout_handle: int | None = None

    @property
    def name(self) -> str:
        return self.test.name

    @property
    def state(self) -> TestState:
        return self.test.state

    def start(self) -> None:
        """Move from pending to running; no-op when already running."""
        self._ensure_not_terminal("start")
        if self.test.state is TestState.PENDING:
            self.test.state = TestState.RUNNING
            log.debug("Test started: %s", self.name)

    def done(self) -> None:
        """Finish a running test as passed, or failed if any assertion failed."""
        self._ensure_not_terminal("done")
        if self.test.state is not TestState.RUNNING:
            raise InvalidStateError(f"Test '{self.name}' was never started")
        self._finish(TestState.FAILED if self.test.failures else TestState.PASSED)

    def fail(self, result: AssertionResult) -> None:
        """Record a result without changing state."""
        self._ensure_not_terminal("fail")
        self.test.record(result)

    def step[R](self, work: Callable[..., R], *args: Any) -> R | None:
        """Run `work` as a step of this test."""
        return run_step(self.test, work, *args)

    def step_func[R](self, work: Callable[..., R]) -> Callable[..., R | None]:
        """Wrap `work` as a step for use as a timer or event callback.

        The wrapper does nothing once the test has finished, since listeners
        and timers may outlive the test.
        """

        @functools.wraps(work)
        def wrapper(*args: Any) -> R | None:
            if self.test.is_terminal:
                log.log(
                    logging.INFO if self.config.report_late_steps else logging.DEBUG,
                    "Ignoring step for finished test '%s' (%s)",
                    self.name,
                    self.test.state,
                )
                return None
            return self.step(work, *args)

        return wrapper

    def step_func_done(
        self, work: Callable[..., object] | None = None
    ) -> Callable[..., None]:
        """Wrap `work` as a step that finishes the test afterwards."""

        def finish(*args: Any) -> None:
            if work is not None:
                work(*args)
            self.done()

        return self.step_func(finish)

    def step_timeout(self, work: Callable[..., object], delay: float) -> int:
        """Run `work` as a step after `delay` ms.

        Returns:
            Timer handle, usable with `TimerRegistry.clear_timer`

        """
        return self.timers.set_timeout(self.step_func(work), delay)

    def arm_timeout(self) -> None:
        """Schedule the per-test timeout."""
        if self._timeout_handle is not None:
            self.timers.clear_timer(self._timeout_handle)
        self._timeout_handle = self.timers.set_timeout(
            self._expire, self.config.timeout
        )

    def _expire(self) -> None:
        self._timeout_handle = None
        if self.test.is_terminal:
            return

        error = TestTimeoutError(
            f"Test '{self.name}' timed out after {self.config.timeout:g} ms "
            f"in state {self.test.state}"
        )
        log.warning("%s", error)
        self.test.record(
            AssertionResult(predicate="timeout", message=str(error), outcome=False)
        )
        self._finish(TestState.TIMED_OUT)

    def _finish(self, state: TestState) -> None:
        self.test.state = state
        if self._timeout_handle is not None:
            self.timers.clear_timer(self._timeout_handle)
            self._timeout_handle = None
        self.registry.report(self.test)

    def _ensure_not_terminal(self, operation: str) -> None:
        if self.test.is_terminal:
            raise InvalidStateError(
                f"Cannot call {operation}() on test '{self.name}' "
                f"in state {self.test.state}"
            )
