"""
Pytest configuration and shared fixtures for the ResQ SOS client tests.

Provides fake scanners, fake beacon sources, a no-delay mock incident
service and a controller factory with millisecond poll intervals.
"""

import asyncio
import os
from collections.abc import Callable
from typing import Any

import pytest

# Set test environment before imports
os.environ["RESQ_ENVIRONMENT"] = "development"
os.environ["RESQ_LOG_LEVEL"] = "WARNING"

from resq_client.application.interfaces.beacon_source import BeaconSource
from resq_client.application.use_cases.incident_session_controller import IncidentSessionController
from resq_client.core.config import BeaconScanSettings, SessionSettings
from resq_client.domain.enums import SessionState
from resq_client.domain.events import DomainEvent
from resq_client.domain.value_objects import BeaconSignal
from resq_client.infrastructure.ble import ProximityScanner, ScanCandidate
from resq_client.infrastructure.http import MockIncidentService, MockServiceConfig

from .fixtures.test_data import FALLBACK_ID


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: integration test")
    config.addinivalue_line("markers", "slow: slow running test")


class FakeScanner(ProximityScanner):
    """Scanner that replays scripted candidates on the event loop."""

    def __init__(
        self,
        candidates: list[ScanCandidate] | None = None,
        delay: float = 0.0,
        start_error: Exception | None = None,
        scan_error: Exception | None = None,
    ):
        self.candidates = candidates or []
        self.delay = delay
        self.start_error = start_error
        self.scan_error = scan_error
        self.start_calls = 0
        self.stop_calls = 0
        self.delivered: list[ScanCandidate] = []
        self.active = False
        self._feeder: asyncio.Task[None] | None = None

    async def start(self, on_candidate, on_error) -> None:
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error
        self.active = True
        self._feeder = asyncio.get_running_loop().create_task(self._feed(on_candidate, on_error))

    async def _feed(self, on_candidate, on_error) -> None:
        for candidate in self.candidates:
            if self.delay:
                await asyncio.sleep(self.delay)
            if not self.active:
                return
            self.delivered.append(candidate)
            on_candidate(candidate)
        if self.scan_error is not None and self.active:
            on_error(self.scan_error)

    async def stop(self) -> None:
        self.stop_calls += 1
        self.active = False
        if self._feeder is not None and not self._feeder.done():
            self._feeder.cancel()


class FakeBeaconSource(BeaconSource):
    """Beacon source that answers immediately with a fixed signal."""

    def __init__(self, signal: BeaconSignal | None = None, delay: float = 0.0):
        self.signal = signal or BeaconSignal.fallback(FALLBACK_ID, "Campus Beacon (Bluetooth unavailable)")
        self.delay = delay
        self.scan_calls = 0
        self.timeouts: list[float | None] = []

    async def scan(self, timeout: float | None = None) -> BeaconSignal:
        self.scan_calls += 1
        self.timeouts.append(timeout)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.signal


class EventRecorder:
    """Collects controller events."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    def __call__(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list[Any]:
        return [e for e in self.events if isinstance(e, event_type)]


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the loop until ``predicate`` holds or fail the test."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            pytest.fail("Condition not reached in time")
        await asyncio.sleep(0.002)


async def wait_for_state(controller: IncidentSessionController, state: SessionState, timeout: float = 2.0) -> None:
    await wait_until(lambda: controller.state is state, timeout)


@pytest.fixture
def scan_settings() -> BeaconScanSettings:
    return BeaconScanSettings(timeout=0.2, fallback_beacon_id=FALLBACK_ID)


@pytest.fixture
def session_settings() -> SessionSettings:
    return SessionSettings(poll_interval=0.01, max_backoff=0.04, backoff_jitter=False)


@pytest.fixture
def mock_service() -> MockIncidentService:
    """Mock incident service with no scripted responses and no delay."""
    return MockIncidentService(MockServiceConfig(simulate_delay=False), script=[])


@pytest.fixture
def beacon_source() -> FakeBeaconSource:
    return FakeBeaconSource()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
async def make_controller(mock_service, beacon_source, session_settings, recorder):
    """Factory for controllers wired to the shared fakes."""
    created: list[IncidentSessionController] = []

    def factory(**overrides: Any) -> IncidentSessionController:
        controller = IncidentSessionController(
            incident_service=overrides.pop("incident_service", mock_service),
            beacon_source=overrides.pop("beacon_source", beacon_source),
            settings=overrides.pop("settings", session_settings),
            **overrides,
        )
        controller.subscribe(recorder)
        created.append(controller)
        return controller

    yield factory

    for controller in created:
        controller.cancel()
