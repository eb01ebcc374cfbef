"""Harness configuration."""

from pydantic import Field

from conformance_harness.models.base import Model


class HarnessConfig(Model):
    """Configuration shared by every test in a run."""

    timeout: float = Field(
        default=10000, gt=0, description="Per-test timeout in logical milliseconds"
    )
    report_late_steps: bool = Field(
        default=False,
        description="Log steps ignored after test completion at INFO level",
    )
