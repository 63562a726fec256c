"""Application ports."""

from .beacon_source import BeaconSource
from .incident_service_interface import IncidentServiceInterface
from .position_provider import PositionProvider

__all__ = ["BeaconSource", "IncidentServiceInterface", "PositionProvider"]
