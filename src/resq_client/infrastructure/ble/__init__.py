"""BLE proximity beacon resolution."""

from .beacon_resolver import BeaconResolver
from .qualifier import BeaconQualifier, extract_ibeacon_uuid
from .scanner import BleakProximityScanner, ProximityScanner, ScanCandidate

__all__ = [
    "BeaconResolver",
    "BeaconQualifier",
    "extract_ibeacon_uuid",
    "BleakProximityScanner",
    "ProximityScanner",
    "ScanCandidate",
]
