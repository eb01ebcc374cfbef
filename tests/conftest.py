"""Shared fixtures for harness tests."""

import pytest

from conformance_harness.clock.timers import TimerRegistry
from conformance_harness.clock.virtual import VirtualClock
from conformance_harness.controller import AsyncTestController
from conformance_harness.harness import Harness
from conformance_harness.models.config import HarnessConfig
from conformance_harness.registry import SuiteRegistry, init_suite


@pytest.fixture
def clock() -> VirtualClock:
    """Create a virtual clock at t=0."""
    return VirtualClock()


@pytest.fixture
def timers(clock: VirtualClock) -> TimerRegistry:
    """Create timers on the virtual clock."""
    return TimerRegistry(clock)


@pytest.fixture
def registry() -> SuiteRegistry:
    """Create an empty registry."""
    return init_suite()


@pytest.fixture
def config() -> HarnessConfig:
    """Create a config with a short timeout."""
    return HarnessConfig(timeout=5000)


@pytest.fixture
def controller(
    registry: SuiteRegistry, timers: TimerRegistry, config: HarnessConfig
) -> AsyncTestController:
    """Create a controller for a freshly registered test."""
    test = registry.register("T1")
    return AsyncTestController(
        test=test, registry=registry, timers=timers, config=config
    )


@pytest.fixture
def harness(clock: VirtualClock, config: HarnessConfig) -> Harness:
    """Create a harness on the virtual clock."""
    return Harness(config=config, clock=clock)
