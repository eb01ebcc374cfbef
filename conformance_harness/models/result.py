"""Models for assertion outcomes and test verdicts."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum


class TestState(StrEnum):
    """Lifecycle state of a test."""

    __test__ = False

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        """Whether the state is absorbing."""
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({TestState.PASSED, TestState.FAILED, TestState.TIMED_OUT})


@dataclass(frozen=True, kw_only=True)
class AssertionResult:
    """Outcome of a single evaluated predicate."""

    predicate: str
    message: str
    outcome: bool


@dataclass(frozen=True, kw_only=True)
class SummaryEntry:
    """Verdict of one test as it appears in the suite summary.

    Failure messages are ordered as recorded, so the first failing assertion
    comes first.
    """

    name: str
    state: TestState
    messages: Sequence[str] = ()
    timed_out: bool = False

    @property
    def passed(self) -> bool:
        return self.state is TestState.PASSED
