"""Summary output and exit codes for a finished suite."""

import logging
from collections.abc import Sequence
from typing import Any

from conformance_harness.models.result import SummaryEntry, TestState

STATUS_SYMBOLS = {
    TestState.PASSED: "✓",
    TestState.FAILED: "✗",
    TestState.TIMED_OUT: "⏱",
}


def log_results_summary(log: logging.Logger, summary: Sequence[SummaryEntry]) -> None:
    """Log a formatted summary of test verdicts."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for entry in summary:
        symbol = STATUS_SYMBOLS.get(entry.state, "?")
        log.info("%s %s: %s", symbol, entry.name, entry.state)
        if entry.messages:
            log.info("  Message: %s", entry.messages[0])


def format_output(summary: Sequence[SummaryEntry]) -> dict[str, Any]:
    """Format verdicts for JSON output."""
    results = [
        {
            "name": entry.name,
            "status": str(entry.state),
            "messages": list(entry.messages),
            "timed_out": entry.timed_out,
        }
        for entry in summary
    ]

    return {
        "total": len(results),
        "passed": sum(1 for entry in summary if entry.state is TestState.PASSED),
        "failed": sum(1 for entry in summary if entry.state is TestState.FAILED),
        "timeouts": sum(1 for entry in summary if entry.state is TestState.TIMED_OUT),
        "results": results,
    }


def exit_code(summary: Sequence[SummaryEntry]) -> int:
    """Return 0 if every test passed, 1 otherwise."""
    return 0 if all(entry.passed for entry in summary) else 1
