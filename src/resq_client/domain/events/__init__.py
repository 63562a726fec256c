"""Domain events."""

from .base import DomainEvent
from .session_events import (
    GuardAssigned,
    IncidentResolved,
    PollFailed,
    RatingSubmitted,
    SessionStateChanged,
    SessionUpdated,
    SubmissionFailed,
)

__all__ = [
    "DomainEvent",
    "SessionStateChanged",
    "SessionUpdated",
    "GuardAssigned",
    "IncidentResolved",
    "PollFailed",
    "SubmissionFailed",
    "RatingSubmitted",
]
