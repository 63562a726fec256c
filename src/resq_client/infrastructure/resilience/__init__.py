"""Resilience patterns for the poll loop."""

from .backoff import BackoffPolicy

__all__ = ["BackoffPolicy"]
