"""Port for best-effort device positioning."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...domain.value_objects import GeoPosition


class PositionProvider(ABC):
    """Source of the device's geographic position."""

    @abstractmethod
    async def current_position(self) -> GeoPosition | None:
        """
        Return the current position, or ``None`` when unknown.

        Raises:
            PositionUnavailableError: If the position service failed
        """
        pass
