"""Assertions recorded against the test of the current step.

A failing assertion is recorded and returned; it does not interrupt the step
or finish the test. The verdict is decided when the test finishes.
"""

import logging

from conformance_harness.models.result import AssertionResult
from conformance_harness.step import current_test

log = logging.getLogger(__name__)


def _record(
    predicate: str, outcome: bool, message: str, detail: str
) -> AssertionResult:
    test = current_test()
    text = f"{predicate}: {message} {detail}" if message else f"{predicate}: {detail}"
    result = AssertionResult(predicate=predicate, message=text, outcome=outcome)
    test.record(result)
    if not outcome:
        log.info("Assertion failed in test '%s': %s", test.name, text)
    return result


def assert_true(condition: object, message: str = "") -> AssertionResult:
    """Record whether `condition` is truthy."""
    return _record(
        "assert_true", bool(condition), message, f"expected true got {condition!r}"
    )


def assert_false(condition: object, message: str = "") -> AssertionResult:
    """Record whether `condition` is falsy."""
    return _record(
        "assert_false", not condition, message, f"expected false got {condition!r}"
    )


def assert_equals(
    actual: object, expected: object, message: str = ""
) -> AssertionResult:
    """Record whether `actual` equals `expected`."""
    return _record(
        "assert_equals",
        actual == expected,
        message,
        f"expected {expected!r} but got {actual!r}",
    )


def assert_unreached(message: str = "") -> AssertionResult:
    """Record a failure for code that should never run."""
    return _record("assert_unreached", False, message, "reached unreachable code")
