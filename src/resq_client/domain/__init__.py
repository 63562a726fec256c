"""Domain layer: incident session model, events and pure services."""

from .entities import IncidentSession, SessionChanges, StatusUpdate
from .enums import BeaconOrigin, DisplayState, GuardStatus, IncidentStatus, SessionState
from .services import derive_display_state
from .value_objects import BeaconSignal, GeoPosition, GuardAssignment, Priority

__all__ = [
    "IncidentSession",
    "SessionChanges",
    "StatusUpdate",
    "BeaconOrigin",
    "DisplayState",
    "GuardStatus",
    "IncidentStatus",
    "SessionState",
    "derive_display_state",
    "BeaconSignal",
    "GeoPosition",
    "GuardAssignment",
    "Priority",
]
