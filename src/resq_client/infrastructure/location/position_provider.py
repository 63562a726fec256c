"""Position providers for hosts without a platform location service."""

from __future__ import annotations

import structlog

from resq_client.application.interfaces.position_provider import PositionProvider
from resq_client.domain.value_objects import GeoPosition

logger = structlog.get_logger(__name__)


class StaticPositionProvider(PositionProvider):
    """Reports a fixed, configured position (kiosks, desktop testing)."""

    def __init__(self, latitude: float, longitude: float, accuracy: float | None = None):
        self._position = GeoPosition(latitude=latitude, longitude=longitude, accuracy=accuracy)

    async def current_position(self) -> GeoPosition | None:
        return self._position


class NullPositionProvider(PositionProvider):
    """No positioning available; sessions fall back to the textual placeholder."""

    async def current_position(self) -> GeoPosition | None:
        logger.debug("No position provider configured")
        return None


def position_provider_from_settings(latitude: float | None, longitude: float | None) -> PositionProvider:
    if latitude is None or longitude is None:
        return NullPositionProvider()
    return StaticPositionProvider(latitude, longitude)
