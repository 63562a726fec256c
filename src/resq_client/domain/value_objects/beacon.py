"""Beacon signal value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from resq_client.core.exceptions.domain import InvalidValueObjectError
from resq_client.domain.enums import BeaconOrigin


@dataclass(frozen=True)
class BeaconSignal:
    """Result of one beacon scan: a discovered transmitter or the fallback placeholder."""

    identifier: str
    display_name: str
    origin: BeaconOrigin
    rssi: int | None = None
    local_name: str | None = None

    def __post_init__(self) -> None:
        if not self.identifier or not self.identifier.strip():
            raise InvalidValueObjectError("Beacon identifier cannot be empty")

    @classmethod
    def fallback(cls, identifier: str, display_name: str = "Campus Beacon (Fallback)") -> BeaconSignal:
        return cls(identifier=identifier, display_name=display_name, origin=BeaconOrigin.FALLBACK)

    @property
    def is_fallback(self) -> bool:
        return self.origin is BeaconOrigin.FALLBACK

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "display_name": self.display_name,
            "origin": self.origin.value,
            "rssi": self.rssi,
            "local_name": self.local_name,
        }
