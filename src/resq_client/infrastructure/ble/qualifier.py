"""Beacon qualification rule and iBeacon payload decoding."""

from __future__ import annotations

import uuid

from resq_client.core.config.ble_settings import BeaconScanSettings

from .scanner import ScanCandidate

APPLE_COMPANY_ID = 0x004C
IBEACON_TYPE = 0x02
IBEACON_LENGTH = 0x15


class BeaconQualifier:
    """Decides whether a scan candidate is good enough to report.

    The rule is permissive on purpose: a candidate qualifies when it is
    connectable (or does not say) and either carries a beacon marker in its
    name or has any usable signal.
    """

    def __init__(self, settings: BeaconScanSettings):
        self.marker_tokens = settings.marker_tokens
        self.rssi_threshold = settings.rssi_threshold

    def has_marker(self, candidate: ScanCandidate) -> bool:
        names = [n.lower() for n in (candidate.name, candidate.local_name) if n]
        return any(token in name for name in names for token in self.marker_tokens)

    def has_usable_signal(self, candidate: ScanCandidate) -> bool:
        # rssi of 0 means "not reported" on several stacks
        return bool(candidate.rssi) and candidate.rssi > self.rssi_threshold

    def qualifies(self, candidate: ScanCandidate) -> bool:
        if candidate.connectable is False:
            return False
        return self.has_marker(candidate) or self.has_usable_signal(candidate)


def extract_ibeacon_uuid(manufacturer_data: dict[int, bytes]) -> str | None:
    """Proximity UUID from Apple iBeacon manufacturer data, if present.

    Layout after the company id: type (0x02), length (0x15), UUID (16),
    major (2), minor (2), tx power (1).
    """
    payload = manufacturer_data.get(APPLE_COMPANY_ID)
    if not payload or len(payload) < 18:
        return None
    if payload[0] != IBEACON_TYPE or payload[1] != IBEACON_LENGTH:
        return None
    return str(uuid.UUID(bytes=bytes(payload[2:18])))
