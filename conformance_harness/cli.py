"""CLI entry point for running conformance suites."""

import argparse
import asyncio
import json
import logging
import sys

from conformance_harness.clock.base import Clock
from conformance_harness.clock.loop import AsyncioClock
from conformance_harness.clock.virtual import VirtualClock
from conformance_harness.harness import Harness
from conformance_harness.models.config import HarnessConfig
from conformance_harness.report import exit_code, format_output, log_results_summary
from conformance_harness.suites.loading import load_suite_manifest


async def run(suite_key: str, config_json: str = "{}", realtime: bool = False) -> int:
    """Run a suite and return exit code."""
    log = logging.getLogger("conformance_harness")

    log.info("Loading suite: %s", suite_key)
    manifest = load_suite_manifest(suite_key)
    config = HarnessConfig(**json.loads(config_json))

    clock: Clock = AsyncioClock() if realtime else VirtualClock()
    harness = Harness(config=config, clock=clock)
    manifest.define(harness)

    if not len(harness.registry):
        log.info("Suite %s defines no tests", suite_key)
        print(json.dumps({"total": 0, "results": []}))
        return 0

    summary = await harness.run()

    log_results_summary(log, summary)
    print(json.dumps(format_output(summary), indent=2))

    return exit_code(summary)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run asynchronous conformance tests")
    parser.add_argument(
        "--suite",
        required=True,
        help="Suite key (e.g. css-transitions)",
    )
    parser.add_argument(
        "--config",
        default="{}",
        help='JSON harness configuration (e.g. {"timeout": 5000})',
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Wait for real time to pass instead of using a virtual clock",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for messages on stderr",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    sys.exit(
        asyncio.run(
            run(suite_key=args.suite, config_json=args.config, realtime=args.realtime)
        )
    )


if __name__ == "__main__":  # pragma: no cover
    main()
