"""Port for the proximity beacon resolver."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...domain.value_objects import BeaconSignal


class BeaconSource(ABC):
    """Something that always answers with a beacon signal."""

    @abstractmethod
    async def scan(self, timeout: float | None = None) -> BeaconSignal:
        """Resolve a beacon within ``timeout`` seconds. Must never raise."""
        pass
