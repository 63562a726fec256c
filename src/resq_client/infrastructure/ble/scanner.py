"""Proximity scanner port and the bleak-backed adapter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import structlog
from bleak import BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError

from resq_client.core.exceptions.infrastructure import ScanUnavailableError

logger = structlog.get_logger(__name__)

# Key of the CoreBluetooth advertisement dictionary carried in platform_data
CONNECTABLE_KEY = "kCBAdvDataIsConnectable"


@dataclass(frozen=True)
class ScanCandidate:
    """One advertisement seen during a scan."""

    address: str
    name: str | None = None
    local_name: str | None = None
    rssi: int | None = None
    connectable: bool | None = None  # None when the platform does not report it
    manufacturer_data: dict[int, bytes] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return self.name or self.local_name or "BLE Device"


CandidateCallback = Callable[[ScanCandidate], None]
ErrorCallback = Callable[[Exception], None]


class ProximityScanner(ABC):
    """Platform proximity scanning capability."""

    @abstractmethod
    async def start(self, on_candidate: CandidateCallback, on_error: ErrorCallback) -> None:
        """
        Begin delivering candidates to ``on_candidate``.

        Raises:
            ScanUnavailableError: If scanning cannot start on this device
        """
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Stop scanning and release the radio. Idempotent."""
        pass


class BleakProximityScanner(ProximityScanner):
    """BLE scanning through :class:`bleak.BleakScanner`."""

    def __init__(self, adapter: str | None = None):
        self._adapter = adapter
        self._scanner: BleakScanner | None = None

    async def start(self, on_candidate: CandidateCallback, on_error: ErrorCallback) -> None:
        def detection_callback(device: BLEDevice, advertisement_data: AdvertisementData) -> None:
            try:
                on_candidate(self._to_candidate(device, advertisement_data))
            except Exception as e:
                on_error(e)

        kwargs = {"adapter": self._adapter} if self._adapter else {}
        try:
            self._scanner = BleakScanner(detection_callback=detection_callback, **kwargs)
            await self._scanner.start()
        except (BleakError, OSError) as e:
            self._scanner = None
            raise ScanUnavailableError(f"Bluetooth scanning unavailable: {e}") from e

        logger.debug("BLE scan started", adapter=self._adapter)

    async def stop(self) -> None:
        scanner, self._scanner = self._scanner, None
        if scanner is None:
            return
        await scanner.stop()
        logger.debug("BLE scan stopped")

    @staticmethod
    def _to_candidate(device: BLEDevice, advertisement_data: AdvertisementData) -> ScanCandidate:
        return ScanCandidate(
            address=device.address,
            name=device.name,
            local_name=advertisement_data.local_name,
            rssi=advertisement_data.rssi,
            connectable=_connectable(advertisement_data),
            manufacturer_data=dict(advertisement_data.manufacturer_data),
        )


def _connectable(advertisement_data: AdvertisementData) -> bool | None:
    """Read connectability from the backend payload.

    Only CoreBluetooth reports it. BlueZ and WinRT leave it unknown.
    """
    for item in getattr(advertisement_data, "platform_data", None) or ():
        if isinstance(item, Mapping) and CONNECTABLE_KEY in item:
            return bool(item[CONNECTABLE_KEY])
    return None
