"""Error taxonomy for the conformance harness."""

from conformance_harness.models.result import AssertionResult


class HarnessError(Exception):
    """Base class for all harness errors."""


class AssertionFailure(HarnessError):
    """A failing assertion, carrying the recorded result."""

    def __init__(self, result: AssertionResult) -> None:
        super().__init__(result.message)
        self.result = result


class InvalidStateError(HarnessError):
    """Raised when an operation is not allowed in the current test state."""


class DuplicateNameError(HarnessError):
    """Raised when a test name is registered twice."""


class ContextError(HarnessError):
    """Raised when an assertion is made outside of a step."""


class TestTimeoutError(HarnessError, TimeoutError):
    """Raised (and recorded) when a test exceeds the per-test timeout."""

    __test__ = False


class IncompleteSuiteError(HarnessError):
    """Raised when a suite is finalized with non-terminal tests."""

    def __init__(self, names: list[str]) -> None:
        super().__init__(f"Tests did not complete: {', '.join(names)}")
        self.names = names
