"""Domain entities."""

from .incident_session import IncidentSession, SessionChanges, StatusUpdate

__all__ = ["IncidentSession", "SessionChanges", "StatusUpdate"]
