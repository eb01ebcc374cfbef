"""css-transitions suite manifest."""

from conformance_harness.suites.css_transitions.suite import define_tests
from conformance_harness.suites.manifest import SuiteManifest

css_transitions_manifest = SuiteManifest(
    name="css-transitions",
    description="Transition events on elements hidden mid-transition",
    define=define_tests,
)
