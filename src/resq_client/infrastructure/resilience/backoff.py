"""Exponential backoff for the status poll loop."""

from __future__ import annotations

import random


class BackoffPolicy:
    """Delay schedule for a poll loop that never gives up.

    The first delay after ``n`` consecutive failures is
    ``base_delay * multiplier ** n`` capped at ``max_delay``. Zero failures
    gives exactly ``base_delay`` so healthy polling keeps its fixed cadence.
    """

    def __init__(
        self,
        base_delay: float = 5.0,
        max_delay: float = 30.0,
        multiplier: float = 2.0,
        jitter: bool = True,
    ):
        """Initialize backoff policy.

        Args:
            base_delay: Delay in seconds between healthy polls
            max_delay: Maximum delay in seconds after repeated failures
            multiplier: Base for exponential growth
            jitter: Whether to add random jitter to failure delays
        """
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if max_delay < base_delay:
            raise ValueError("max_delay must be greater than or equal to base_delay")

        self.base_delay = base_delay
        self.max_delay = max_delay
        self.multiplier = multiplier
        self.jitter = jitter

    def delay_for(self, consecutive_failures: int) -> float:
        """Seconds to wait before the next poll."""
        if consecutive_failures <= 0:
            return self.base_delay

        delay = min(self.base_delay * (self.multiplier**consecutive_failures), self.max_delay)

        if self.jitter:
            # Add random jitter (±25% of delay), never below the healthy cadence
            jitter_amount = delay * 0.25
            delay += random.uniform(-jitter_amount, jitter_amount)
            delay = max(self.base_delay, min(delay, self.max_delay))

        return delay
