"""Domain value objects for incident sessions."""

from .beacon import BeaconSignal
from .geo import GeoPosition
from .guard import GuardAssignment, Priority

__all__ = [
    "BeaconSignal",
    "GeoPosition",
    "GuardAssignment",
    "Priority",
]
