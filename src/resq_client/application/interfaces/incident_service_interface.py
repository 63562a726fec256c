"""Port for the remote incident service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..dtos.incident_dtos import (
    IncidentDetailResponse,
    RatingRequest,
    ReportSOSRequest,
    ReportSOSResponse,
    StatusPollResponse,
)


class IncidentServiceInterface(ABC):
    """Remote operations the session controller consumes."""

    @abstractmethod
    async def submit_incident(self, request: ReportSOSRequest) -> ReportSOSResponse:
        """
        Report an SOS incident. Not idempotent on the server.

        Raises:
            IncidentServiceError: If the service rejects or cannot be reached
        """
        pass

    @abstractmethod
    async def poll_status(self, incident_id: str) -> StatusPollResponse:
        """
        Fetch the current status of an incident. Safe to repeat.

        Raises:
            IncidentServiceError: If the query fails
        """
        pass

    @abstractmethod
    async def submit_rating(self, incident_id: str, request: RatingRequest) -> None:
        """Deliver a satisfaction rating. Callers treat it as best effort."""
        pass

    @abstractmethod
    async def get_incident(self, incident_id: str) -> IncidentDetailResponse:
        """Fetch incident details."""
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None
