"""Loading of suites from entry points."""

from importlib.metadata import entry_points

from conformance_harness.errors import HarnessError
from conformance_harness.suites.manifest import SuiteManifest

ENTRY_POINT_GROUP = "conformance_harness.suites"


class SuiteNotFoundError(HarnessError):
    """Raised when a suite is not found."""


def available_suites() -> list[str]:
    """Return the keys of all installed suites, sorted."""
    return sorted(entry.name for entry in entry_points(group=ENTRY_POINT_GROUP))


def load_suite_manifest(key: str) -> SuiteManifest:
    """Load a suite manifest by key.

    Args:
        key: The suite key as registered in pyproject.toml
             (e.g., "css-transitions")

    Returns:
        The suite manifest instance

    Raises:
        SuiteNotFoundError: If no suite with the given key is found

    """
    for entry in entry_points(group=ENTRY_POINT_GROUP):
        if entry.name == key:
            manifest: SuiteManifest = entry.load()
            return manifest

    raise SuiteNotFoundError(
        f"Suite '{key}' not found. Available suites: {available_suites()}"
    )
