"""css-transitions fixture suite."""

from conformance_harness.suites.css_transitions.element import (
    SimulatedElement,
    TransitionEvent,
)
from conformance_harness.suites.css_transitions.manifest import (
    css_transitions_manifest,
)

__all__ = ["SimulatedElement", "TransitionEvent", "css_transitions_manifest"]
