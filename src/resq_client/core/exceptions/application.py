"""Application-specific exception classes."""

from __future__ import annotations

from typing import Any

from .base import ApplicationError


class SubmissionFailure(ApplicationError):
    """Raised when the SOS incident could not be submitted.

    This is the only failure surfaced to the user; the session stays in the
    ERROR state until the user explicitly retries.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "ERROR",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "SUBMISSION_FAILURE", details)
        self.error_type = error_type
        self.status_code = status_code


class PollFailure(ApplicationError):
    """A single status poll failed. Logged and reported, never raised to callers."""

    def __init__(self, message: str, incident_id: str, consecutive_failures: int = 1) -> None:
        super().__init__(message, "POLL_FAILURE", {"incident_id": incident_id})
        self.incident_id = incident_id
        self.consecutive_failures = consecutive_failures


class RatingSubmissionFailure(ApplicationError):
    """The satisfaction rating could not be delivered. Always swallowed."""

    pass


class ValidationError(ApplicationError):
    """Raised when caller input validation fails."""

    pass
