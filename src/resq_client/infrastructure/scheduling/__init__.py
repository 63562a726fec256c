"""Poll scheduling."""

from .poll_scheduler import PollOutcome, PollScheduler

__all__ = ["PollOutcome", "PollScheduler"]
