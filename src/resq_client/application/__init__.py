"""Application layer: wire DTOs, ports and the session use case.

The controller lives in :mod:`resq_client.application.use_cases`; it is not
re-exported here because infrastructure adapters import this package.
"""

from .dtos import (
    IncidentDetailResponse,
    RatingRequest,
    ReportSOSRequest,
    ReportSOSResponse,
    StatusPollResponse,
)
from .interfaces import BeaconSource, IncidentServiceInterface, PositionProvider

__all__ = [
    "IncidentDetailResponse",
    "RatingRequest",
    "ReportSOSRequest",
    "ReportSOSResponse",
    "StatusPollResponse",
    "BeaconSource",
    "IncidentServiceInterface",
    "PositionProvider",
]
