"""Domain-specific exception classes."""

from .base import DomainError


class InvalidValueObjectError(DomainError):
    """Raised when a value object cannot be created due to invalid data."""

    pass


class InvalidSessionTransitionError(DomainError):
    """Raised when a controller action is not allowed in the current state."""

    pass


class SessionClosedError(DomainError):
    """Raised when a resolved session receives another status update."""

    pass
