"""Time-bounded beacon resolution with a guaranteed fallback."""

from __future__ import annotations

import asyncio

import structlog

from resq_client.application.interfaces.beacon_source import BeaconSource
from resq_client.core.config.ble_settings import BeaconScanSettings
from resq_client.domain.enums import BeaconOrigin
from resq_client.domain.value_objects import BeaconSignal

from .qualifier import BeaconQualifier, extract_ibeacon_uuid
from .scanner import ProximityScanner, ScanCandidate

logger = structlog.get_logger(__name__)


class BeaconResolver(BeaconSource):
    """Resolves the nearest campus beacon, or the configured fallback.

    ``scan`` is total: it always returns a :class:`BeaconSignal` and never
    raises. The first qualifying candidate wins. The scanner is stopped on
    every exit path.
    """

    def __init__(
        self,
        scanner: ProximityScanner | None,
        settings: BeaconScanSettings | None = None,
        qualifier: BeaconQualifier | None = None,
        stop_timeout: float = 2.0,
    ):
        """Initialize the resolver.

        Args:
            scanner: Platform scanner, or ``None`` when the device has no BLE support
            settings: Timeout, fallback id and qualification policy
            qualifier: Override for the qualification rule
            stop_timeout: Upper bound in seconds for releasing the scanner
        """
        self.settings = settings or BeaconScanSettings()
        self._scanner = scanner
        self._qualifier = qualifier or BeaconQualifier(self.settings)
        self._stop_timeout = stop_timeout
        self._scanning = False

    @property
    def is_scanning(self) -> bool:
        return self._scanning

    @property
    def fallback_beacon_id(self) -> str:
        return self.settings.fallback_beacon_id

    async def scan(self, timeout: float | None = None) -> BeaconSignal:
        """Scan for up to ``timeout`` seconds (default from settings)."""
        if self._scanning:
            logger.warning("Scan already in progress, using fallback beacon")
            return self._fallback("Campus Beacon (Scan in progress)")

        self._scanning = True
        try:
            window = timeout if timeout and timeout > 0 else self.settings.timeout
            return await self._scan(window)
        except Exception as e:
            logger.error("Beacon scan failed, using fallback beacon", error=str(e))
            return self._fallback()
        finally:
            self._scanning = False

    async def _scan(self, timeout: float) -> BeaconSignal:
        if self._scanner is None:
            logger.info("BLE not available on this device, using fallback beacon")
            return self._fallback("Campus Beacon (Bluetooth unavailable)")

        result: asyncio.Future[BeaconSignal] = asyncio.get_running_loop().create_future()
        seen = 0

        def on_candidate(candidate: ScanCandidate) -> None:
            nonlocal seen
            if result.done():
                return
            seen += 1
            if self._qualifier.qualifies(candidate):
                result.set_result(self._discovered(candidate))

        def on_error(error: Exception) -> None:
            if result.done():
                return
            logger.warning("BLE scan error, using fallback beacon", error=str(error))
            result.set_result(self._fallback("Campus Beacon (Scan error)"))

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        logger.info("Starting BLE scan", timeout=timeout)
        try:
            await asyncio.wait_for(self._scanner.start(on_candidate, on_error), timeout=timeout)
        except TimeoutError:
            logger.warning("BLE scanner did not start in time, using fallback beacon", timeout=timeout)
            await self._release()
            return self._fallback()
        except Exception as e:
            logger.warning("BLE scanning unavailable, using fallback beacon", error=str(e))
            await self._release()
            return self._fallback("Campus Beacon (Bluetooth unavailable)")

        try:
            # The scan window covers the start-up time as well.
            beacon = await asyncio.wait_for(result, timeout=max(deadline - loop.time(), 0))
        except TimeoutError:
            logger.info("Scan timeout reached, using fallback beacon", devices_seen=seen)
            return self._fallback()
        finally:
            await self._release()

        logger.info(
            "Beacon resolved",
            beacon_id=beacon.identifier,
            origin=beacon.origin.value,
            devices_seen=seen,
        )
        return beacon

    async def _release(self) -> None:
        if self._scanner is None:
            return
        try:
            await asyncio.wait_for(self._scanner.stop(), timeout=self._stop_timeout)
        except Exception as e:
            logger.warning("Failed to stop BLE scan cleanly", error=str(e))

    def _discovered(self, candidate: ScanCandidate) -> BeaconSignal:
        identifier = extract_ibeacon_uuid(candidate.manufacturer_data) or self.settings.fallback_beacon_id
        return BeaconSignal(
            identifier=identifier,
            display_name=candidate.label,
            origin=BeaconOrigin.DISCOVERED,
            rssi=candidate.rssi,
            local_name=candidate.local_name,
        )

    def _fallback(self, display_name: str = "Campus Beacon (Fallback)") -> BeaconSignal:
        return BeaconSignal.fallback(self.settings.fallback_beacon_id, display_name)
