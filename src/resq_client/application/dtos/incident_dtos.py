"""Wire DTOs for the remote incident service.

Every field of a poll response is optional. An absent (or null) field
means "no news this tick" and maps to ``None`` on :class:`StatusUpdate`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...domain.entities.incident_session import StatusUpdate
from ...domain.enums import GuardStatus, IncidentStatus
from ...domain.value_objects import GuardAssignment, Priority


class WireModel(BaseModel):
    """Lenient base: unknown keys from the server are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ReportSOSRequest(WireModel):
    """Body of ``POST /incidents/report_sos/``."""

    beacon_id: str = Field(..., min_length=1, description="Resolved beacon identifier")
    description: str = Field(default="", max_length=2000)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)

    @field_validator("beacon_id", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class BeaconPayload(WireModel):
    id: str | None = None
    location_name: str | None = None


class IncidentPayload(WireModel):
    id: str | None = None
    status: IncidentStatus | None = None
    beacon: BeaconPayload | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class ReportSOSResponse(WireModel):
    """Response of ``POST /incidents/report_sos/``."""

    incident_id: str | None = None
    status: IncidentStatus | None = None
    incident: IncidentPayload | None = None

    @field_validator("incident_id", mode="before")
    @classmethod
    def coerce_incident_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @property
    def resolved_incident_id(self) -> str | None:
        """Incident id from the top level, or from the nested incident."""
        if self.incident_id:
            return self.incident_id
        if self.incident and self.incident.id:
            return self.incident.id
        return None

    @property
    def initial_status(self) -> IncidentStatus:
        """Initial status, defaulting to CREATED when the server omits it."""
        if self.incident and self.incident.status:
            return self.incident.status
        return self.status or IncidentStatus.CREATED

    @property
    def location_name(self) -> str | None:
        if self.incident and self.incident.beacon:
            return self.incident.beacon.location_name
        return None


class GuardStatusPayload(WireModel):
    status: GuardStatus | None = None
    message: str | None = None


class GuardPayload(WireModel):
    full_name: str | None = None
    name: str | None = None
    phone: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str | None:
        return self.full_name or self.name


class GuardAssignmentPayload(WireModel):
    guard: GuardPayload | None = None


class StatusPollResponse(WireModel):
    """Response of ``GET /incidents/{id}/status_poll/``."""

    status: IncidentStatus | None = None
    guard_status: GuardStatusPayload | None = None
    pending_alerts: list[Any] | None = None
    guard_assignment: GuardAssignmentPayload | None = None
    priority: float | None = None
    priority_display: str | None = None
    location: str | None = None

    def to_status_update(self) -> StatusUpdate:
        """Translate the wire shape into a domain update."""
        guard = None
        if self.guard_assignment and self.guard_assignment.guard and self.guard_assignment.guard.display_name:
            payload = self.guard_assignment.guard
            guard = GuardAssignment(
                name=payload.display_name,
                contact_phone=payload.phone,
                contact_channel=payload.email,
            )

        priority = None
        if self.priority is not None:
            priority = Priority(level=self.priority, label=self.priority_display)

        return StatusUpdate(
            status=self.status,
            guard_status=self.guard_status.status if self.guard_status else None,
            status_message=self.guard_status.message if self.guard_status else None,
            pending_alerts=self.pending_alerts,
            guard=guard,
            priority=priority,
            location=self.location or None,
        )


class RatingRequest(WireModel):
    """Body of the optional rating endpoint."""

    rating: int = Field(..., ge=0, le=5)
    feedback: str | None = Field(default=None, max_length=2000)


class IncidentDetailResponse(WireModel):
    """Response of ``GET /incidents/{id}/``. Only the fields the CLI shows."""

    id: str
    status: IncidentStatus
    description: str | None = None
    created_at: str | None = None
    beacon: BeaconPayload | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v
