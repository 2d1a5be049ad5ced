"""Shared fixtures for indep tests."""

import pytest

from indep.config import IndepConfig
from indep.registry import CapabilitySchema


@pytest.fixture
def schema():
    """Schema with three capability kinds."""
    return CapabilitySchema("Lifecycle", ["Clock", "Store", "Notifier"])


@pytest.fixture
def strict_schema():
    """Schema that warns on conflicting rebinds."""
    return CapabilitySchema(
        "Lifecycle", ["Clock", "Store", "Notifier"], config=IndepConfig.strict()
    )


@pytest.fixture
def clock_cls(schema):
    """Component providing Clock, requiring nothing."""

    @schema.component(provides=["Clock"])
    class SystemClock:
        def now(self):
            return 42

    return SystemClock


@pytest.fixture
def store_cls(schema):
    """Component providing Store, requiring a Clock."""

    @schema.component(provides=["Store"], requires={"clock": "Clock"})
    class MemoryStore:
        def __init__(self):
            self.items = {}

    return MemoryStore
