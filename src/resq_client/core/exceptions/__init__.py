"""Exception hierarchy for the ResQ SOS client.

Only ``SubmissionFailure`` is ever surfaced to the user. Poll, scan and
rating failures degrade silently so the emergency flow keeps moving.
"""

from .application import (
    PollFailure,
    RatingSubmissionFailure,
    SubmissionFailure,
    ValidationError,
)
from .base import (
    ApplicationError,
    DomainError,
    InfrastructureError,
    ResQClientError,
)
from .domain import (
    InvalidSessionTransitionError,
    InvalidValueObjectError,
    SessionClosedError,
)
from .infrastructure import (
    BadRequestError,
    ForbiddenError,
    IncidentServiceError,
    NetworkError,
    NotFoundError,
    ParseError,
    PositionUnavailableError,
    ScanUnavailableError,
    ServerError,
    UnauthorizedError,
)

__all__ = [
    # Base exceptions
    "ResQClientError",
    "ApplicationError",
    "DomainError",
    "InfrastructureError",
    # Domain exceptions
    "InvalidValueObjectError",
    "InvalidSessionTransitionError",
    "SessionClosedError",
    # Infrastructure exceptions
    "IncidentServiceError",
    "NetworkError",
    "ParseError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "ScanUnavailableError",
    "PositionUnavailableError",
    # Application exceptions
    "SubmissionFailure",
    "PollFailure",
    "RatingSubmissionFailure",
    "ValidationError",
]
