"""Domain enums for incident sessions."""

from __future__ import annotations

from enum import Enum

_STATUS_DESCRIPTIONS = {
    "CREATED": "Incident reported. Waiting for security response...",
    "ASSIGNED": "Security team assigned to your incident.",
    "IN_PROGRESS": "Security is on the way to your location.",
    "RESOLVED": "Incident has been resolved.",
}


class IncidentStatus(str, Enum):
    """Server-authoritative incident lifecycle status."""

    CREATED = "CREATED"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"

    @property
    def description(self) -> str:
        """Human-readable status line."""
        return _STATUS_DESCRIPTIONS[self.value]

    @property
    def is_terminal(self) -> bool:
        return self is IncidentStatus.RESOLVED


class GuardStatus(str, Enum):
    """Guard search progress reported by the server."""

    SEARCHING = "SEARCHING"
    WAITING_FOR_GUARD = "WAITING_FOR_GUARD"
    GUARD_ASSIGNED = "GUARD_ASSIGNED"
    NO_ASSIGNMENT = "NO_ASSIGNMENT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value: object) -> GuardStatus:
        if isinstance(value, str):
            upper = value.strip().upper()
            for member in cls:
                if member.value == upper:
                    return member
        return cls.UNKNOWN


class BeaconOrigin(str, Enum):
    """Where a beacon signal came from."""

    DISCOVERED = "discovered"
    FALLBACK = "fallback"


class SessionState(str, Enum):
    """Client-side state of an incident session controller."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    ACTIVE = "active"
    RESOLVED = "resolved"
    ERROR = "error"


class DisplayState(str, Enum):
    """Mutually exclusive view state derived from the latest session data."""

    SEARCHING = "searching"
    GUARD_ASSIGNED = "guard_assigned"
    NO_GUARD_AVAILABLE = "no_guard_available"
    RESOLVED = "resolved"
