"""End-to-end run of the bundled css-transitions suite."""

import pytest

from conformance_harness.harness import Harness
from conformance_harness.models.result import TestState
from conformance_harness.report import exit_code
from conformance_harness.suites.css_transitions import css_transitions_manifest
from conformance_harness.suites.css_transitions.suite import CHECK_AT


@pytest.fixture
def suite_harness() -> Harness:
    """Create a harness with the css-transitions suite defined."""
    harness = Harness()
    css_transitions_manifest.define(harness)
    return harness


async def test_all_tests_pass(suite_harness: Harness) -> None:
    """Every test in the suite passes on the simulated element."""
    summary = await suite_harness.run()

    assert [(entry.name, entry.state) for entry in summary] == [
        ("transitionend does not fire after display:none", TestState.PASSED),
        ("transitioncancel fires when hidden mid-transition", TestState.PASSED),
        ("transitionend fires when the element stays visible", TestState.PASSED),
    ]
    assert exit_code(summary) == 0


async def test_run_is_deterministic() -> None:
    """Two runs produce identical summaries and end at the same time."""
    runs = []
    for _ in range(2):
        harness = Harness()
        css_transitions_manifest.define(harness)
        runs.append((await harness.run(), harness.clock.now))

    assert runs[0] == runs[1]
    assert runs[0][1] == CHECK_AT


async def test_hidden_test_fails_if_element_keeps_rendering(
    suite_harness: Harness,
) -> None:
    """A renderer that ignores display:none makes the first test fail."""
    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(
            "conformance_harness.suites.css_transitions.element."
            "SimulatedElement.set_display",
            lambda self, value: None,
        )
        summary = await suite_harness.run()

    hidden = summary[0]
    assert hidden.state is TestState.FAILED
    assert hidden.messages[0] == (
        "assert_unreached: transitionend fired on a hidden element "
        "reached unreachable code"
    )
    assert summary[1].state is TestState.TIMED_OUT
    assert exit_code(summary) == 1
