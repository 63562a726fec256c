"""Infrastructure layer for the ResQ SOS client."""

from .ble import BeaconQualifier, BeaconResolver, BleakProximityScanner, ProximityScanner, ScanCandidate
from .http import AuthContext, IncidentApiClient, MockIncidentService, MockServiceConfig
from .location import NullPositionProvider, StaticPositionProvider, position_provider_from_settings
from .resilience import BackoffPolicy
from .scheduling import PollOutcome, PollScheduler

__all__ = [
    # BLE
    "BeaconResolver",
    "BeaconQualifier",
    "BleakProximityScanner",
    "ProximityScanner",
    "ScanCandidate",
    # Remote incident service
    "AuthContext",
    "IncidentApiClient",
    "MockIncidentService",
    "MockServiceConfig",
    # Positioning
    "NullPositionProvider",
    "StaticPositionProvider",
    "position_provider_from_settings",
    # Polling
    "BackoffPolicy",
    "PollOutcome",
    "PollScheduler",
]
