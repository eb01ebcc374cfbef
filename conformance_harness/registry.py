"""Registry of tests and their verdicts for one suite run."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from conformance_harness.errors import (
    DuplicateNameError,
    IncompleteSuiteError,
    InvalidStateError,
)
from conformance_harness.models.result import AssertionResult, SummaryEntry, TestState

log = logging.getLogger(__name__)


@dataclass(kw_only=True, eq=False)
class Test:
    """A registered test and everything recorded for it."""

    __test__ = False

    name: str
    state: TestState = TestState.PENDING
    results: list[AssertionResult] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def failures(self) -> Sequence[AssertionResult]:
        """Failing results in the order they were recorded."""
        return [result for result in self.results if not result.outcome]

    def record(self, result: AssertionResult) -> None:
        """Append a result; finished tests accept no further results."""
        if self.is_terminal:
            raise InvalidStateError(
                f"Cannot record result for test '{self.name}' in state {self.state}"
            )
        self.results.append(result)


class SuiteRegistry:
    """Tests of a suite in registration order.

    Tests report here exactly once, when they reach a terminal state.
    """

    def __init__(self) -> None:
        self._tests: dict[str, Test] = {}
        self._reported: set[str] = set()
        self._sealed = False

    def __len__(self) -> int:
        return len(self._tests)

    def __contains__(self, name: object) -> bool:
        return name in self._tests

    @property
    def tests(self) -> Sequence[Test]:
        return list(self._tests.values())

    @property
    def is_complete(self) -> bool:
        """Whether every registered test has reached a terminal state."""
        return all(test.is_terminal for test in self._tests.values())

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, name: str) -> Test:
        """Create and store a pending test.

        Raises:
            DuplicateNameError: If a test with this name already exists
            InvalidStateError: If the suite has been finalized

        """
        if self._sealed:
            raise InvalidStateError(f"Suite is finalized, cannot register '{name}'")
        if name in self._tests:
            raise DuplicateNameError(f"Test '{name}' is already registered")

        test = Test(name=name)
        self._tests[name] = test
        return test

    def get(self, name: str) -> Test:
        return self._tests[name]

    def report(self, test: Test) -> None:
        """Accept the verdict of a finished test."""
        if self._tests.get(test.name) is not test:
            raise InvalidStateError(f"Test '{test.name}' is not registered here")
        if not test.is_terminal:
            raise InvalidStateError(
                f"Test '{test.name}' reported in non-terminal state {test.state}"
            )
        if test.name in self._reported:
            raise InvalidStateError(f"Test '{test.name}' was already reported")

        self._reported.add(test.name)
        log.info(
            "Test finished: name=%s state=%s failures=%d",
            test.name,
            test.state,
            len(test.failures),
        )

    def summary(self) -> Sequence[SummaryEntry]:
        """Verdicts of all registered tests, in registration order."""
        return [
            SummaryEntry(
                name=test.name,
                state=test.state,
                messages=tuple(result.message for result in test.failures),
                timed_out=test.state is TestState.TIMED_OUT,
            )
            for test in self._tests.values()
        ]

    def seal(self) -> None:
        """Refuse further registrations."""
        self._sealed = True


def init_suite() -> SuiteRegistry:
    """Start a new suite with an empty registry."""
    log.debug("Initializing suite")
    return SuiteRegistry()


def finalize_suite(registry: SuiteRegistry) -> Sequence[SummaryEntry]:
    """Seal the registry and return its summary.

    Raises:
        IncompleteSuiteError: If any registered test is not terminal

    """
    registry.seal()

    if incomplete := [test.name for test in registry.tests if not test.is_terminal]:
        raise IncompleteSuiteError(incomplete)

    summary = registry.summary()
    log.info(
        "Suite finalized: %d test(s), %d passed",
        len(summary),
        sum(1 for entry in summary if entry.passed),
    )
    return summary
