"""Scoped execution of test logic with fault capture."""

import logging
from collections.abc import Callable
from contextvars import ContextVar
from typing import Any

from conformance_harness.errors import AssertionFailure, ContextError, InvalidStateError
from conformance_harness.models.result import AssertionResult
from conformance_harness.registry import Test

log = logging.getLogger(__name__)

_active_test: ContextVar[Test | None] = ContextVar("active_test", default=None)


def current_test() -> Test:
    """Return the test of the step being executed.

    Raises:
        ContextError: If called outside of a step

    """
    if (test := _active_test.get()) is None:
        raise ContextError("Assertion made outside of a step")
    return test


def run_step[R](test: Test, work: Callable[..., R], *args: Any) -> R | None:
    """Run `work(*args)` with assertions bound to `test`.

    Exceptions raised by `work` are recorded on `test` as failing results and
    never reach the caller. The binding is always released.

    Returns:
        Whatever `work` returned, or None if it raised

    Raises:
        InvalidStateError: If `test` has already finished

    """
    if test.is_terminal:
        raise InvalidStateError(
            f"Cannot run step for test '{test.name}' in state {test.state}"
        )

    token = _active_test.set(test)
    try:
        return work(*args)
    except AssertionFailure as exc:
        log.info("Step aborted in test '%s': %s", test.name, exc.result.message)
        _record_fault(test, exc.result)
    except Exception as exc:
        log.exception("Uncaught error in step of test '%s'", test.name)
        _record_fault(
            test,
            AssertionResult(
                predicate="uncaught",
                message=f"{type(exc).__name__}: {exc}",
                outcome=False,
            ),
        )
    finally:
        _active_test.reset(token)
    return None


def _record_fault(test: Test, result: AssertionResult) -> None:
    # The step may have finished the test before failing.
    if test.is_terminal:
        log.warning(
            "Dropping failure for finished test '%s': %s", test.name, result.message
        )
        return
    test.record(result)
