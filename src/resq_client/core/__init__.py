"""Core module containing cross-cutting concerns."""

from .config import Settings, get_settings
from .exceptions import (
    ApplicationError,
    DomainError,
    IncidentServiceError,
    InfrastructureError,
    PollFailure,
    ResQClientError,
    SubmissionFailure,
    ValidationError,
)

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Exceptions
    "ResQClientError",
    "DomainError",
    "ApplicationError",
    "InfrastructureError",
    "IncidentServiceError",
    "SubmissionFailure",
    "PollFailure",
    "ValidationError",
]
