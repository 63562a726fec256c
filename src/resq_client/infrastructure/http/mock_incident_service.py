"""In-memory incident service for development and testing."""

from __future__ import annotations

import asyncio
import random
import uuid
from collections import deque
from typing import Any

import structlog
from pydantic import BaseModel

from resq_client.application.dtos.incident_dtos import (
    IncidentDetailResponse,
    RatingRequest,
    ReportSOSRequest,
    ReportSOSResponse,
    StatusPollResponse,
)
from resq_client.application.interfaces.incident_service_interface import IncidentServiceInterface
from resq_client.core.exceptions.infrastructure import IncidentServiceError, NotFoundError, ServerError

logger = structlog.get_logger(__name__)

DEMO_SCRIPT: list[dict[str, Any]] = [
    {"status": "CREATED", "guard_status": {"status": "WAITING_FOR_GUARD", "message": "Alerting nearby guards"}, "pending_alerts": [1, 2]},
    {"status": "CREATED", "guard_status": {"status": "WAITING_FOR_GUARD"}, "pending_alerts": [1]},
    {
        "status": "ASSIGNED",
        "guard_status": {"status": "GUARD_ASSIGNED", "message": "A guard accepted your alert"},
        "guard_assignment": {"guard": {"full_name": "J. Rao", "phone": "+15550100", "email": "j.rao@campus.edu"}},
        "priority": 2,
        "priority_display": "High",
    },
    {"status": "IN_PROGRESS"},
    {"status": "RESOLVED"},
]


class MockServiceConfig(BaseModel):
    """Configuration for the mock incident service."""

    simulate_delay: bool = True
    min_delay_ms: int = 50
    max_delay_ms: int = 400
    failure_rate: float = 0.0  # 0.0 = no failures, 1.0 = always fail polls
    initial_status: str = "CREATED"
    location_name: str | None = "Campus Beacon"


class MockIncidentService(IncidentServiceInterface):
    """Scripted stand-in for the remote incident service.

    Poll responses are served from a queue; once it runs dry the last
    response is repeated. Call counters make it easy to assert on traffic.
    """

    def __init__(self, config: MockServiceConfig | None = None, script: list[dict[str, Any]] | None = None):
        self.config = config or MockServiceConfig()
        self._script: deque[dict[str, Any]] = deque(script if script is not None else DEMO_SCRIPT)
        self._last_payload: dict[str, Any] = {"status": self.config.initial_status}
        self._submit_error: IncidentServiceError | None = None
        self._poll_failures_pending = 0

        self.incidents: dict[str, ReportSOSRequest] = {}
        self.ratings: dict[str, RatingRequest] = {}
        self.submit_calls = 0
        self.poll_calls = 0
        self.rating_calls = 0

    def queue_poll_responses(self, *payloads: dict[str, Any]) -> None:
        self._script.extend(payloads)

    def fail_next_submission(self, error: IncidentServiceError | None = None) -> None:
        self._submit_error = error or ServerError("Server error. Please try again later.", status_code=500)

    def fail_next_polls(self, count: int) -> None:
        self._poll_failures_pending = max(0, count)

    async def submit_incident(self, request: ReportSOSRequest) -> ReportSOSResponse:
        self.submit_calls += 1
        await self._simulate_delay()

        if self._submit_error is not None:
            error, self._submit_error = self._submit_error, None
            raise error

        incident_id = uuid.uuid4().hex[:12]
        self.incidents[incident_id] = request
        logger.debug("Mock incident created", incident_id=incident_id, beacon_id=request.beacon_id)
        return ReportSOSResponse.model_validate(
            {
                "incident_id": incident_id,
                "incident": {
                    "id": incident_id,
                    "status": self.config.initial_status,
                    "beacon": {"id": request.beacon_id, "location_name": self.config.location_name},
                },
            }
        )

    async def poll_status(self, incident_id: str) -> StatusPollResponse:
        self.poll_calls += 1
        await self._simulate_delay()

        if self._poll_failures_pending > 0:
            self._poll_failures_pending -= 1
            raise ServerError("Server error. Please try again later.", status_code=503)
        if self.config.failure_rate > 0 and random.random() < self.config.failure_rate:
            raise ServerError("Mock service simulated failure", status_code=503)

        if self._script:
            self._last_payload = self._script.popleft()
        return StatusPollResponse.model_validate(self._last_payload)

    async def submit_rating(self, incident_id: str, request: RatingRequest) -> None:
        self.rating_calls += 1
        await self._simulate_delay()
        self.ratings[incident_id] = request

    async def get_incident(self, incident_id: str) -> IncidentDetailResponse:
        if incident_id not in self.incidents:
            raise NotFoundError("Resource not found.", status_code=404)
        request = self.incidents[incident_id]
        return IncidentDetailResponse.model_validate(
            {
                "id": incident_id,
                "status": self._last_payload.get("status", self.config.initial_status),
                "description": request.description,
                "beacon": {"id": request.beacon_id, "location_name": self.config.location_name},
            }
        )

    async def _simulate_delay(self) -> None:
        if not self.config.simulate_delay:
            return
        delay_ms = random.randint(self.config.min_delay_ms, self.config.max_delay_ms)
        await asyncio.sleep(delay_ms / 1000)
