"""Remote incident service adapters."""

from .auth import AuthContext
from .incident_api_client import IncidentApiClient
from .mock_incident_service import DEMO_SCRIPT, MockIncidentService, MockServiceConfig

__all__ = [
    "AuthContext",
    "IncidentApiClient",
    "MockIncidentService",
    "MockServiceConfig",
    "DEMO_SCRIPT",
]
