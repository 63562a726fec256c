"""Incident session entity: the client-side mirror of one server incident."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pytz
import structlog

from resq_client.core.exceptions.domain import SessionClosedError
from resq_client.domain.enums import GuardStatus, IncidentStatus
from resq_client.domain.value_objects import BeaconSignal, GeoPosition, GuardAssignment, Priority

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StatusUpdate:
    """One server observation of an incident.

    ``None`` means the field was absent from the response and must not
    change the session. It never means "clear".
    """

    status: IncidentStatus | None = None
    guard_status: GuardStatus | None = None
    status_message: str | None = None
    pending_alerts: list[Any] | None = None
    guard: GuardAssignment | None = None
    priority: Priority | None = None
    location: str | None = None


@dataclass(frozen=True)
class SessionChanges:
    """What a merge actually changed."""

    status_changed: bool = False
    guard_newly_assigned: bool = False
    resolved: bool = False
    fields: tuple[str, ...] = ()


@dataclass
class IncidentSession:
    """State of one SOS incident as last reported by the server.

    Mutated only by the submission response and by poll responses through
    :meth:`apply_status_update`. Once RESOLVED the session is frozen and a
    guard assignment, once set, is never cleared.
    """

    incident_id: str
    beacon: BeaconSignal
    status: IncidentStatus = IncidentStatus.CREATED
    guard_status: GuardStatus | None = None
    status_message: str | None = None
    guard_assignment: GuardAssignment | None = None
    pending_alerts: list[Any] = field(default_factory=list)
    priority: Priority | None = None
    location_label: str | None = None
    position: GeoPosition | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(pytz.utc))
    updated_at: datetime | None = None
    rating: int | None = None
    feedback: str | None = None

    def __post_init__(self) -> None:
        if not self.incident_id:
            raise ValueError("Incident id is required")
        if self.location_label is None:
            self.location_label = self.beacon.display_name

    @property
    def is_resolved(self) -> bool:
        return self.status is IncidentStatus.RESOLVED

    @property
    def pending_alert_count(self) -> int:
        return len(self.pending_alerts)

    def apply_status_update(self, update: StatusUpdate) -> SessionChanges:
        """Merge a server observation into the session.

        Raises:
            SessionClosedError: If the session is already resolved
        """
        if self.is_resolved:
            raise SessionClosedError(
                "Resolved session cannot be updated",
                details={"incident_id": self.incident_id},
            )

        changed: list[str] = []
        previous_status = self.status

        if update.status is not None:
            self.status = update.status
            changed.append("status")

        if update.guard_status is not None:
            # The message belongs to the guard status object; it travels with it.
            self.guard_status = update.guard_status
            self.status_message = update.status_message
            changed.extend(["guard_status", "status_message"])

        if update.pending_alerts is not None:
            self.pending_alerts = list(update.pending_alerts)
            changed.append("pending_alerts")

        newly_assigned = False
        if update.guard is not None:
            newly_assigned = self.guard_assignment is None
            self.guard_assignment = update.guard
            changed.append("guard_assignment")

        if update.priority is not None:
            self.priority = update.priority
            changed.append("priority")

        if update.location:
            self.location_label = update.location
            changed.append("location_label")

        self.updated_at = datetime.now(pytz.utc)

        if newly_assigned:
            logger.info("Guard assigned", incident_id=self.incident_id, guard=self.guard_assignment.name)

        return SessionChanges(
            status_changed=self.status is not previous_status,
            guard_newly_assigned=newly_assigned,
            resolved=self.is_resolved,
            fields=tuple(changed),
        )

    def reset_guard_search(self) -> None:
        """Forget the last search result before searching again. The assignment is kept."""
        self.guard_status = None
        self.status_message = None
        self.pending_alerts = []

    def to_dict(self) -> dict[str, Any]:
        """Convert entity to dictionary representation for serialization"""
        return {
            "incident_id": self.incident_id,
            "status": self.status.value,
            "guard_status": self.guard_status.value if self.guard_status else None,
            "status_message": self.status_message,
            "guard_assignment": self.guard_assignment.to_dict() if self.guard_assignment else None,
            "pending_alert_count": self.pending_alert_count,
            "priority": {"level": self.priority.level, "label": self.priority.label} if self.priority else None,
            "location_label": self.location_label,
            "beacon": self.beacon.to_dict(),
            "position": {"latitude": self.position.latitude, "longitude": self.position.longitude} if self.position else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
