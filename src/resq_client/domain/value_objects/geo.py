"""Geographic position value object."""

from __future__ import annotations

from dataclasses import dataclass

from resq_client.core.exceptions.domain import InvalidValueObjectError


@dataclass(frozen=True)
class GeoPosition:
    """A best-effort device position attached to an SOS."""

    latitude: float
    longitude: float
    accuracy: float | None = None

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidValueObjectError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidValueObjectError(f"Longitude out of range: {self.longitude}")

    def __str__(self) -> str:
        return f"{self.latitude:.5f}, {self.longitude:.5f}"
