"""Domain events emitted by an incident session controller.

The aggregate id is the incident id when one exists, otherwise the
controller's own session key.
"""

from __future__ import annotations

from dataclasses import dataclass

from resq_client.domain.enums import DisplayState, SessionState

from .base import DomainEvent


@dataclass(frozen=True)
class SessionStateChanged(DomainEvent):
    """Raised on every controller state transition."""

    previous_state: SessionState = SessionState.IDLE
    new_state: SessionState = SessionState.IDLE


@dataclass(frozen=True)
class SessionUpdated(DomainEvent):
    """Raised after a poll response was merged."""

    display_state: DisplayState = DisplayState.SEARCHING
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class GuardAssigned(DomainEvent):
    """Raised the first time a guard is attached to the session."""

    guard_name: str = ""
    contact_phone: str | None = None


@dataclass(frozen=True)
class IncidentResolved(DomainEvent):
    """Raised once when the server reports RESOLVED. Polling has stopped."""

    guard_name: str | None = None


@dataclass(frozen=True)
class PollFailed(DomainEvent):
    """Raised when a status poll fails. Polling continues."""

    error_message: str = ""
    error_type: str = ""
    consecutive_failures: int = 1


@dataclass(frozen=True)
class SubmissionFailed(DomainEvent):
    """Raised when the SOS could not be submitted."""

    error_message: str = ""
    error_type: str = ""


@dataclass(frozen=True)
class RatingSubmitted(DomainEvent):
    """Raised when the user rated a resolved incident."""

    rating: int = 0
    feedback: str | None = None
    delivered: bool = False
