"""Infrastructure-specific exception classes."""

from __future__ import annotations

from typing import Any

from .base import InfrastructureError


class IncidentServiceError(InfrastructureError):
    """Base exception for remote incident service errors."""

    error_type = "ERROR"

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None) -> None:
        super().__init__(message, self.error_type, {"status_code": status_code} if status_code is not None else None)
        self.status_code = status_code
        self.detail = detail


class NetworkError(IncidentServiceError):
    """Raised when the service cannot be reached."""

    error_type = "NETWORK_ERROR"


class ParseError(IncidentServiceError):
    """Raised when the service answers with an unreadable payload."""

    error_type = "PARSE_ERROR"


class BadRequestError(IncidentServiceError):
    """Raised on HTTP 400."""

    error_type = "BAD_REQUEST"


class UnauthorizedError(IncidentServiceError):
    """Raised on HTTP 401."""

    error_type = "UNAUTHORIZED"


class ForbiddenError(IncidentServiceError):
    """Raised on HTTP 403."""

    error_type = "FORBIDDEN"


class NotFoundError(IncidentServiceError):
    """Raised on HTTP 404."""

    error_type = "NOT_FOUND"


class ServerError(IncidentServiceError):
    """Raised on HTTP 5xx."""

    error_type = "SERVER_ERROR"


class ScanUnavailableError(InfrastructureError):
    """Raised by scanner adapters when proximity scanning cannot start."""

    pass


class PositionUnavailableError(InfrastructureError):
    """Raised by position providers when no fix can be obtained."""

    pass
