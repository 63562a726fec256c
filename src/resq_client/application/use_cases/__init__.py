"""Application use cases."""

from .incident_session_controller import IncidentSessionController, SessionListener

__all__ = ["IncidentSessionController", "SessionListener"]
