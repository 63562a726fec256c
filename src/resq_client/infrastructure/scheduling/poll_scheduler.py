"""Repeating poll timer owned by an incident session controller."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

import structlog

from ..resilience.backoff import BackoffPolicy

logger = structlog.get_logger(__name__)


class PollOutcome(Enum):
    """Result of one poll tick."""

    CONTINUE = "continue"  # Poll succeeded, keep the base cadence
    FAILED = "failed"  # Poll failed, back off and try again
    DONE = "done"  # Session is terminal or gone, stop for good


class PollScheduler:
    """Runs ``tick`` every interval until stopped or the tick reports DONE.

    The scheduler owns a single task handle. ``stop()`` clearing that handle
    is the only way polling ends from the outside; in-flight ticks are not
    interrupted when ``stop()`` is called from inside one. Ticks never
    overlap: the next delay starts after the previous tick returns.
    """

    def __init__(self, tick: Callable[[], Awaitable[PollOutcome]], backoff: BackoffPolicy, name: str = "poll"):
        self._tick = tick
        self._backoff = backoff
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._consecutive_failures = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    def start(self) -> None:
        """Start ticking. A running scheduler is left untouched."""
        if self.is_running:
            return
        self._consecutive_failures = 0
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"{self._name}-scheduler")
        logger.debug("Poll scheduler started", scheduler=self._name, interval=self._backoff.base_delay)

    def stop(self) -> None:
        """Stop ticking. Safe to call repeatedly and from inside a tick."""
        task, self._task = self._task, None
        if task is None:
            return
        if task is not asyncio.current_task():
            task.cancel()
        logger.debug("Poll scheduler stopped", scheduler=self._name)

    async def _run(self) -> None:
        me = asyncio.current_task()
        while self._task is me:
            await asyncio.sleep(self._backoff.delay_for(self._consecutive_failures))
            if self._task is not me:
                break

            try:
                outcome = await self._tick()
            except Exception as e:
                logger.exception("Poll tick raised", scheduler=self._name, error=str(e))
                outcome = PollOutcome.FAILED

            if outcome is PollOutcome.DONE:
                if self._task is me:
                    self._task = None
                break
            if outcome is PollOutcome.FAILED:
                self._consecutive_failures += 1
            else:
                self._consecutive_failures = 0
