"""Data transfer objects for the remote incident service."""

from .incident_dtos import (
    IncidentDetailResponse,
    RatingRequest,
    ReportSOSRequest,
    ReportSOSResponse,
    StatusPollResponse,
)

__all__ = [
    "ReportSOSRequest",
    "ReportSOSResponse",
    "StatusPollResponse",
    "RatingRequest",
    "IncidentDetailResponse",
]
