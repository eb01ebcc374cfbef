"""Suite manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass

from conformance_harness.harness import Harness


@dataclass(frozen=True, kw_only=True)
class SuiteManifest:
    """Manifest describing a suite plugin.

    `define` registers the suite's tests on a harness; it is only called once
    the suite has been selected by key.
    """

    name: str
    description: str = ""
    define: Callable[[Harness], None]
