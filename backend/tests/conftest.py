"""
Pytest configuration and fixtures for backend tests.

This module is automatically loaded by pytest and provides:
- TESTING environment flag to disable .env loading
- A controllable clock for expiry tests
- Shared fixtures for the flow store, relay and test client
"""

import os

# Set TESTING flag BEFORE any app imports
# This prevents loading .env file during tests, ensuring test isolation
os.environ["TESTING"] = "1"

# No background sweeps in tests unless a test builds its own app
os.environ["FLOW_CLEANUP_INTERVAL_SECONDS"] = "0"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_flow_relay
from app.main import app
from app.services.flow_relay import FlowRelay
from app.services.flow_store import MemoryFlowStore


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock()


@pytest.fixture(name="store")
def store_fixture():
    """Create a new empty flow store for each test."""
    return MemoryFlowStore()


@pytest.fixture(name="relay")
def relay_fixture(store: MemoryFlowStore, clock: FakeClock):
    """Create a relay over the test store driven by the fake clock."""
    return FlowRelay(store=store, now_fn=clock)


@pytest.fixture(name="client")
def client_fixture(relay: FlowRelay):
    """Create a test client with relay dependency override."""

    def get_relay_override():
        return relay

    app.dependency_overrides[get_flow_relay] = get_relay_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
