"""Tests for the beacon qualification rule and iBeacon decoding."""

import pytest

from resq_client.core.config import BeaconScanSettings
from resq_client.infrastructure.ble import BeaconQualifier, ScanCandidate, extract_ibeacon_uuid

from ....fixtures.test_data import IBEACON_UUID, ibeacon_manufacturer_data


@pytest.fixture
def qualifier() -> BeaconQualifier:
    return BeaconQualifier(BeaconScanSettings())


class TestBeaconQualifier:
    """Test candidate qualification."""

    @pytest.mark.parametrize("name", ["ESP32 Beacon", "iBeacon", "NRF52-tag", "my-beacon"])
    def test_marker_names_qualify(self, qualifier: BeaconQualifier, name: str) -> None:
        """Test marker tokens match case-insensitively even with no signal."""
        assert qualifier.qualifies(ScanCandidate(address="x", name=name, rssi=None))

    def test_local_name_marker(self, qualifier: BeaconQualifier) -> None:
        assert qualifier.qualifies(ScanCandidate(address="x", local_name="Campus-Beacon-3"))

    def test_usable_signal_qualifies_unnamed_device(self, qualifier: BeaconQualifier) -> None:
        assert qualifier.qualifies(ScanCandidate(address="x", rssi=-99))

    @pytest.mark.parametrize("rssi", [-100, -120, 0, None])
    def test_unusable_signal_without_marker(self, qualifier: BeaconQualifier, rssi) -> None:
        """Test the threshold is strict and a missing rssi never counts."""
        assert not qualifier.qualifies(ScanCandidate(address="x", name="Headphones", rssi=rssi))

    def test_non_connectable_rejected(self, qualifier: BeaconQualifier) -> None:
        assert not qualifier.qualifies(ScanCandidate(address="x", name="beacon", rssi=-40, connectable=False))

    def test_unreported_connectable_treated_as_connectable(self, qualifier: BeaconQualifier) -> None:
        assert qualifier.qualifies(ScanCandidate(address="x", name="beacon", connectable=None))

    def test_custom_tokens_and_threshold(self) -> None:
        qualifier = BeaconQualifier(BeaconScanSettings(marker_tokens=("TAG",), rssi_threshold=-70))

        assert qualifier.qualifies(ScanCandidate(address="x", name="asset-tag"))
        assert not qualifier.qualifies(ScanCandidate(address="x", name="beacon", rssi=-80))


class TestExtractIBeaconUuid:
    """Test iBeacon manufacturer data decoding."""

    def test_decodes_proximity_uuid(self) -> None:
        assert extract_ibeacon_uuid(ibeacon_manufacturer_data()) == IBEACON_UUID

    def test_non_apple_data(self) -> None:
        assert extract_ibeacon_uuid({0x0059: bytes(23)}) is None

    def test_wrong_type_byte(self) -> None:
        payload = bytearray(ibeacon_manufacturer_data()[0x004C])
        payload[0] = 0x10
        assert extract_ibeacon_uuid({0x004C: bytes(payload)}) is None

    def test_truncated_payload(self) -> None:
        assert extract_ibeacon_uuid({0x004C: bytes([0x02, 0x15, 0x01])}) is None

    def test_empty(self) -> None:
        assert extract_ibeacon_uuid({}) is None
